"""
Core gitmaketree functionality - exceptions and the Git repository wrapper.
"""

from pathlib import Path
from typing import List, Optional

import git
from git import Repo

from .logging_config import get_logger
from .models import RepoState, WorktreeResult, WorktreeStatus

logger = get_logger(__name__)


class GitMakeTreeError(Exception):
    """Base exception for gitmaketree operations."""
    pass


class InvalidNameError(GitMakeTreeError):
    """The branch name derived from the target path is unusable."""
    pass


class NotARepoError(GitMakeTreeError):
    """The working directory is not inside a Git working tree."""
    pass


class UserAbortError(GitMakeTreeError):
    """The user declined a confirmation prompt."""
    pass


class ConfigError(GitMakeTreeError):
    """The configuration file could not be read or is invalid."""
    pass


class GitOperationError(GitMakeTreeError):
    """A Git command failed unexpectedly."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitMakeTreeRepo:
    """Wrapper around the Git repository containing the working directory."""

    def __init__(self, repo_path: Optional[str] = None):
        """Open the repository that contains ``repo_path`` (defaults to cwd)."""
        self.cwd = Path(repo_path) if repo_path else Path.cwd()
        try:
            self.repo = Repo(self.cwd, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotARepoError(f"Not in a working repository: {self.cwd}")

        if self.repo.bare or not self.is_inside_work_tree():
            raise NotARepoError(f"Not in a working repository: {self.cwd}")

    @property
    def root(self) -> Path:
        """Top-level directory of the working tree."""
        return Path(self.repo.working_tree_dir).resolve()

    def is_inside_work_tree(self) -> bool:
        try:
            output = git.Git(str(self.cwd)).rev_parse('--is-inside-work-tree')
        except git.exc.GitCommandError:
            return False
        return output.strip() == 'true'

    def current_branch(self) -> str:
        """Name of the checked out branch, or ``HEAD`` when detached."""
        head = self.repo.head
        if head.is_detached:
            return 'HEAD'
        return head.reference.name

    def has_uncommitted_changes(self) -> bool:
        """True when ``git status --porcelain`` would print anything."""
        return self.repo.is_dirty(index=True, working_tree=True, untracked_files=True)

    def state(self) -> RepoState:
        return RepoState(
            root=self.root,
            is_inside_work_tree=self.is_inside_work_tree(),
            current_branch=self.current_branch(),
            has_uncommitted_changes=self.has_uncommitted_changes(),
        )

    def get_worktrees(self) -> List[dict]:
        """Get all worktrees registered for this repository."""
        try:
            output = self.repo.git.worktree('list', '--porcelain')
        except git.exc.GitCommandError as e:
            raise GitOperationError('worktree list', e.stderr.strip())

        worktrees = []
        current_worktree = {}
        for line in output.split('\n'):
            line = line.strip()
            if line.startswith('worktree '):
                if current_worktree:
                    worktrees.append(current_worktree)
                current_worktree = {'path': line[9:]}
            elif line.startswith('HEAD '):
                current_worktree['head'] = line[5:]
            elif line.startswith('branch '):
                current_worktree['branch'] = line[7:]
            elif line == 'prunable' or line.startswith('prunable '):
                current_worktree['prunable'] = line[9:] or True

        if current_worktree:
            worktrees.append(current_worktree)

        return worktrees

    def is_registered_worktree(self, path: Path) -> bool:
        """Check whether ``path`` is one of this repository's worktrees and still on disk.

        A registered worktree whose directory was deleted (``prunable``) does
        not count, so ``worktree add`` gets to refuse it.
        """
        path = Path(path).resolve()
        for wt in self.get_worktrees():
            if Path(wt['path']).resolve() != path:
                continue
            if wt.get('prunable') or not path.is_dir():
                logger.info(f"{path} is registered but missing: {wt.get('prunable') or 'no directory'}")
                return False
            return True
        return False

    def create_worktree(self, path: Path) -> WorktreeResult:
        """Run ``git worktree add <path>``.

        Git names the branch after the last path segment, creating it from
        HEAD when it does not exist yet.
        """
        path = Path(path)
        if self.is_registered_worktree(path):
            logger.info(f"{path} is already a worktree of {self.root}")
            return WorktreeResult(WorktreeStatus.ALREADY_EXISTS, path, 'already registered as a worktree')

        try:
            self.repo.git.worktree('add', str(path))
        except git.exc.GitCommandError as e:
            stderr = (e.stderr or '').strip()
            logger.debug(f"git worktree add exited with {e.status}: {stderr}")
            # git only reports these conditions as text on stderr
            if 'already exists' in stderr and path.is_dir():
                return WorktreeResult(WorktreeStatus.ALREADY_EXISTS, path, stderr)
            return WorktreeResult(WorktreeStatus.FAILED, path, stderr or str(e))

        return WorktreeResult(WorktreeStatus.CREATED, path)
