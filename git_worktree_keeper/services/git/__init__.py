"""Git-related services for git-worktree-keeper."""

from .repository import RepositoryContext, resolve_repository
from .worktrees import WorktreeService
from .branch_queries import BranchQueries

__all__ = [
    "RepositoryContext",
    "resolve_repository",
    "WorktreeService",
    "BranchQueries",
]
