"""Worktree data models."""

from dataclasses import dataclass
from enum import Enum


class MainLineState(Enum):
    """Relationship of a worktree to the main working tree."""
    IDENTICAL = "identical"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    UNCOMMITTED = "uncommitted"
    STAGED = "staged"
    INACCESSIBLE = "inaccessible"
    UNCHECKED = "unchecked"


class RemoteState(Enum):
    """Whether a worktree's branch exists on the remote."""
    TRACKED = "tracked"
    LOCAL_ONLY = "local-only"
    UNCHECKED = "unchecked"


class BranchSource(Enum):
    """Where the branch name of a worktree entry was learned from."""
    REGISTRATION = "registration"
    LIVE_QUERY = "live-query"
    DIRECTORY_NAME = "directory-name"
    UNKNOWN = "unknown"


@dataclass
class WorktreeInfo:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch_name: str  # Empty when detached
    commit_sha: str
    is_main: bool  # Is this the main working tree?
    is_orphaned: bool  # Directory missing?

    def __str__(self) -> str:
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass
class WorktreeRecord:
    """Classified view of a secondary worktree, rebuilt on every listing."""

    path: str
    branch_name: str
    branch_source: BranchSource
    is_current: bool = False
    state: MainLineState = MainLineState.UNCHECKED
    ahead: int = 0  # Commits on the worktree past the merge base
    behind: int = 0  # Commits on main past the merge base
    remote_state: RemoteState = RemoteState.UNCHECKED
    unpushed: int = 0  # Local commits missing on the remote branch
    unpulled: int = 0  # Remote commits missing on the local branch
    is_dirty: bool = False


@dataclass
class FileStatus:
    """Summary of `git status --porcelain` for one worktree."""

    modified: bool = False
    untracked: bool = False
    staged: bool = False

    @property
    def has_uncommitted(self) -> bool:
        """Unstaged or staged changes to tracked files; untracked files do not count."""
        return self.modified or self.staged
