"""Shared constants for git-worktree-keeper."""

from typing import List

# Defaults
DEFAULT_WORKTREE_DIRNAME = "dev"
DEFAULT_MAIN_BRANCH = "main"
DEFAULT_PROTECTED_BRANCHES: List[str] = ["main", "master"]
DEFAULT_REMOTE = "origin"
DEFAULT_ENV_FILE_PREFIX = ".env"
DEFAULT_EXCLUDED_DIRS: List[str] = ["node_modules", ".git", "dist", "build"]
DEFAULT_INSTALL_COMMAND: List[str] = ["pnpm", "install"]
DEFAULT_OPEN_COMMAND = "cursor"

CONFIG_FILENAME = ".git-worktree-keeper.json"
CONFIG_ENV_VAR = "GIT_WORKTREE_KEEPER_CONFIG"

UNKNOWN_BRANCH = "unknown"

# Commit messages used by the merger
AUTO_COMMIT_MESSAGE = "chore: auto-commit changes in '{branch}' before merge"
MERGE_MESSAGE = "feat: merge changes from '{branch}'"

# Symbol constants
SYMBOL_PROCESSING = "→"
SYMBOL_OK = "✓"
SYMBOL_ERROR = "✖"
SYMBOL_INFO = "ℹ"
SYMBOL_WARNING = "⚠"
SYMBOL_FETCH = "↓"
SYMBOL_CREATED = "✅"
SYMBOL_AHEAD = "✨"
SYMBOL_BEHIND = "⬇️"
SYMBOL_DIVERGED = "🔀"
SYMBOL_DIRTY = "⚠️"
SYMBOL_UNPUSHED = "↑"

SEPARATOR = "-" * 58
