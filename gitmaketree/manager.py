"""
WorktreeManager - validation, worktree creation, links, ignore files and extras.
"""

import shutil
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .config import Config
from .core import (
    GitMakeTreeError,
    GitMakeTreeRepo,
    InvalidNameError,
    UserAbortError,
)
from .logging_config import get_logger
from .models import (
    DISALLOWED_NAME_CHARS,
    CopyResult,
    LinkPair,
    PathWarning,
    RunReport,
    ValidationResult,
    WorktreeRequest,
    WorktreeResult,
    WorktreeStatus,
)
from .utils.gitignore import GITIGNORE, ensure_gitignore, ensure_ignore_entry
from .utils.links import create_or_replace_symlink
from .utils.prompt import confirm as ask_user

logger = get_logger(__name__)


def check_branch_name(request: WorktreeRequest) -> None:
    """Raise InvalidNameError unless the request names a usable branch."""
    if not request.target_path:
        raise InvalidNameError("No worktree path given")

    name = request.branch_name
    if name in ('', '.', '..'):
        raise InvalidNameError(f"Cannot derive a branch name from '{request.target_path}'")

    bad = [c for c in DISALLOWED_NAME_CHARS if c in name]
    if bad:
        shown = ', '.join(repr(c) for c in bad)
        raise InvalidNameError(f"Branch name '{name}' contains disallowed characters: {shown}")


def is_nested(target: Path, cwd: Path) -> bool:
    """True when ``target`` is ``cwd``, lives under it, or contains it."""
    target = Path(target).resolve()
    cwd = Path(cwd).resolve()
    return _is_relative_to(target, cwd) or _is_relative_to(cwd, target)


def _is_relative_to(path: Path, other: Path) -> bool:
    try:
        path.relative_to(other)
        return True
    except ValueError:
        return False


class WorktreeManager:
    """Runs the create -> link -> ignore -> copy sequence for one worktree."""

    def __init__(
        self,
        config: Optional[Config] = None,
        cwd: Optional[Path] = None,
        repo_factory: Callable[[str], GitMakeTreeRepo] = GitMakeTreeRepo,
        confirm: Callable[[str], bool] = ask_user,
    ):
        self.config = config or Config()
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.repo_factory = repo_factory
        self.confirm = confirm
        self._repo: Optional[GitMakeTreeRepo] = None

    @property
    def repo(self) -> GitMakeTreeRepo:
        """The repository containing ``cwd``; raises NotARepoError outside one."""
        if self._repo is None:
            self._repo = self.repo_factory(str(self.cwd))
        return self._repo

    @property
    def parent(self) -> Path:
        """Directory that receives the ``_<branch>`` link: the working tree root."""
        return self.repo.root

    def target_for(self, request: WorktreeRequest) -> Path:
        return request.absolute_path(self.cwd)

    def validate(self, request: WorktreeRequest) -> ValidationResult:
        """Check hard preconditions and collect the warnings to confirm.

        Raises InvalidNameError or NotARepoError; nothing is written.
        """
        check_branch_name(request)

        state = self.repo.state()
        target = self.target_for(request)
        result = ValidationResult(request=request, repo_state=state, target=target)

        if self.config.warn_if_nested_path and is_nested(target, self.cwd):
            result.warnings.append(PathWarning.NESTED_PATH)
        if self.config.warn_if_not_on_main and state.current_branch not in self.config.main_branches:
            logger.info(f"Current branch is '{state.current_branch}'")
            result.warnings.append(PathWarning.NOT_ON_MAIN_BRANCH)
        if self.config.warn_if_uncommitted and state.has_uncommitted_changes:
            result.warnings.append(PathWarning.UNCOMMITTED_CHANGES)

        return result

    def confirm_warnings(self, result: ValidationResult) -> None:
        """Ask about each warning in turn; the first "no" raises UserAbortError."""
        for warning in result.warnings:
            if not self.confirm(f"WARNING: {warning.message} Continue"):
                raise UserAbortError(f"Aborted: {warning.message}")

    def create_worktree(self, request: WorktreeRequest) -> WorktreeResult:
        """Add the worktree; an existing one is reported, not treated as an error."""
        target = self.target_for(request)
        result = self.repo.create_worktree(target)

        if result.status == WorktreeStatus.CREATED:
            print(f"Created worktree '{request.branch_name}' at {target}")
        elif result.status == WorktreeStatus.ALREADY_EXISTS:
            print(f"Worktree {target} already exists, updating links")
        else:
            logger.error(f"Error using git worktree add {target}: {result.message}")
        return result

    def link_and_ignore(self, request: WorktreeRequest) -> Tuple[List[Path], List[str]]:
        """Create both links and register each in its directory's .gitignore.

        Returns the links created and the errors met; nothing is raised.
        """
        target = self.target_for(request)
        parent = self.parent
        pair = LinkPair.for_request(request, parent, target)

        created = []
        errors = []
        for link, points_to in ((pair.parent_link, target), (pair.worktree_link, parent)):
            try:
                create_or_replace_symlink(link, points_to)
            except (OSError, GitMakeTreeError) as e:
                msg = f"Error unable to create link {link}: {e}"
                logger.error(msg)
                errors.append(msg)
                continue

            created.append(link)
            print(f"Linked {link} -> {points_to}")

            try:
                self._ignore(link.parent, link.name)
            except (OSError, UnicodeError) as e:
                msg = f"Error unable to update {link.parent / GITIGNORE}: {e}"
                logger.error(msg)
                errors.append(msg)

        return created, errors

    def _ignore(self, directory: Path, entry: str) -> None:
        gitignore_path = directory / GITIGNORE
        if ensure_gitignore(directory):
            print(f"{gitignore_path} created. \"{GITIGNORE}\" added to {gitignore_path}")
        else:
            logger.info(f"{gitignore_path} already exists. \"{GITIGNORE}\" NOT added to it")

        ensure_ignore_entry(gitignore_path, entry)
        print(f"\"{entry}\" added to {gitignore_path}")

    def copy_extras(self, request: WorktreeRequest, paths: Iterable[str]) -> List[CopyResult]:
        """Copy each path into the worktree under its base name.

        Failures are reported in the results and never abort the run.
        """
        target = self.target_for(request)
        results = []

        for raw in paths:
            source = Path(raw).expanduser()
            if not source.is_absolute():
                source = self.parent / source
            destination = target / source.name

            results.append(self._copy_one(source, destination))

        return results

    def _copy_one(self, source: Path, destination: Path) -> CopyResult:
        if not source.exists():
            msg = f"Error unable to copy {source} to {destination.parent}: no such file or directory"
            logger.error(msg)
            return CopyResult(source, destination, False, msg)

        if destination.exists() and self.config.overwrite == 'ask':
            if not self.confirm(f"{destination} already exists. Overwrite"):
                logger.info(f"Skipped {source}")
                return CopyResult(source, destination, False, 'declined overwrite', skipped=True)

        try:
            if source.is_dir():
                shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(source, destination)
        except (OSError, shutil.Error) as e:
            msg = f"Error unable to copy {source} to {destination.parent}: {e}"
            logger.error(msg)
            return CopyResult(source, destination, False, msg)

        print(f"Copied {source} to {destination}")
        return CopyResult(source, destination, True)

    def run(self, request: WorktreeRequest, extra_paths: Optional[Iterable[str]] = None) -> RunReport:
        """Validate, confirm, create, link, ignore and copy, in that order."""
        validation = self.validate(request)
        print(f"New worktree absolute path: {validation.target}")
        self.confirm_warnings(validation)

        report = RunReport(request=request)
        report.worktree = self.create_worktree(request)
        if report.worktree.status == WorktreeStatus.FAILED:
            report.errors.append(report.worktree.message)
            if not self.confirm("WARNING: git worktree add failed. Continue anyway"):
                raise UserAbortError(f"Aborted: git worktree add {validation.target} failed")

        links, errors = self.link_and_ignore(request)
        report.links_created.extend(links)
        report.errors.extend(errors)

        if extra_paths is None:
            extra_paths = self.config.copy_extras
        report.copies = self.copy_extras(request, extra_paths)
        report.errors.extend(c.message for c in report.copies if not c.copied and not c.skipped)

        return report
