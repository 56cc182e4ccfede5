"""Core operations of git-worktree-keeper."""

from .creator import WorktreeCreator
from .lister import WorktreeInspector
from .merger import WorktreeMerger

__all__ = ["WorktreeCreator", "WorktreeInspector", "WorktreeMerger"]
