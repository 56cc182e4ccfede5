"""Formatting utilities for git-worktree-keeper."""

from .status import (
    format_state,
    format_remote_annotation,
    format_full_state,
    format_worktree_line,
)

__all__ = [
    "format_state",
    "format_remote_annotation",
    "format_full_state",
    "format_worktree_line",
]
