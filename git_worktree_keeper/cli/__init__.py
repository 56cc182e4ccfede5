"""Command-line interface for git-worktree-keeper.

This package provides the CLI entry points and argument parsing.
"""

from .main import main, create_worktrees, list_worktrees, merge_worktree
from .args import parse_args

__all__ = ["main", "create_worktrees", "list_worktrees", "merge_worktree", "parse_args"]
