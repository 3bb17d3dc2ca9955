"""
Data model for gitmaketree.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


DISALLOWED_NAME_CHARS = (' ', '^', '\\', ':', '~')

PARENT_LINK_NAME = '_parent'


@dataclass
class WorktreeRequest:
    """A worktree to create, named after the last segment of its path."""

    target_path: str
    branch_name: str

    @classmethod
    def from_path(cls, target_path: str) -> "WorktreeRequest":
        # Path() drops trailing separators, so "../feature-x/" still names "feature-x"
        branch_name = Path(target_path).name if target_path else ''
        return cls(target_path=target_path, branch_name=branch_name)

    @property
    def link_name(self) -> str:
        """Name of the link placed in the parent repository."""
        return f"_{self.branch_name}"

    def absolute_path(self, base: Path) -> Path:
        """Resolve the target against ``base`` (symlinks included)."""
        path = Path(self.target_path).expanduser()
        if not path.is_absolute():
            path = base / path
        return path.resolve()


@dataclass
class RepoState:
    """Snapshot of the repository the tool was started in."""

    root: Path
    is_inside_work_tree: bool
    current_branch: str
    has_uncommitted_changes: bool


class PathWarning(Enum):
    """Conditions that need the user's confirmation before proceeding."""

    NESTED_PATH = "Worktree path should not be inside the current directory or a sub-path."
    NOT_ON_MAIN_BRANCH = "Not on the main branch or latest commit."
    UNCOMMITTED_CHANGES = "Uncommitted or unstaged files exist."

    @property
    def message(self) -> str:
        return self.value


@dataclass
class ValidationResult:
    request: WorktreeRequest
    repo_state: RepoState
    target: Path
    warnings: List[PathWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


class WorktreeStatus(Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class WorktreeResult:
    status: WorktreeStatus
    path: Path
    message: str = ''

    @property
    def usable(self) -> bool:
        """True when the worktree directory can be linked and filled."""
        return self.status in (WorktreeStatus.CREATED, WorktreeStatus.ALREADY_EXISTS)


@dataclass
class LinkPair:
    """The two links tying a worktree and its parent together."""

    parent_link: Path
    worktree_link: Path

    @classmethod
    def for_request(cls, request: WorktreeRequest, parent: Path, worktree: Path) -> "LinkPair":
        return cls(
            parent_link=parent / request.link_name,
            worktree_link=worktree / PARENT_LINK_NAME,
        )


@dataclass
class CopyResult:
    source: Path
    destination: Path
    copied: bool
    message: str = ''
    skipped: bool = False


@dataclass
class RunReport:
    """Outcome of a full run, soft failures included."""

    request: WorktreeRequest
    worktree: Optional[WorktreeResult] = None
    links_created: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    copies: List[CopyResult] = field(default_factory=list)

    @property
    def target(self) -> Optional[Path]:
        return self.worktree.path if self.worktree else None
