"""
git-worktree-keeper - Create, inspect and merge git worktrees
"""

from .__version__ import __version__
from .cli.main import main

__all__ = ["main", "__version__"]
