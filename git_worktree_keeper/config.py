"""Configuration handling for git-worktree-keeper"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Union

from git_worktree_keeper.constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_ENV_FILE_PREFIX,
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_MAIN_BRANCH,
    DEFAULT_OPEN_COMMAND,
    DEFAULT_PROTECTED_BRANCHES,
    DEFAULT_REMOTE,
    DEFAULT_WORKTREE_DIRNAME,
)
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Layout
    worktree_parent: Optional[str] = None  # None = ~/dev
    main_branch: str = DEFAULT_MAIN_BRANCH
    protected_branches: List[str] = field(default_factory=lambda: list(DEFAULT_PROTECTED_BRANCHES))
    remote_name: str = DEFAULT_REMOTE

    # Creation
    env_file_prefix: str = DEFAULT_ENV_FILE_PREFIX
    excluded_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS))
    install_command: List[str] = field(default_factory=lambda: list(DEFAULT_INSTALL_COMMAND))
    open_command: Optional[str] = DEFAULT_OPEN_COMMAND  # None or "" disables
    copy_env: bool = True
    install_deps: bool = False
    quiet: bool = False

    # Listing
    show_status: bool = True

    # Merging
    cleanup_all: bool = False

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_main_branch()
        self._validate_protected_branches()
        self._validate_remote_name()
        self._validate_env_file_prefix()
        self._validate_install_command()

    def _validate_main_branch(self):
        """Validate main_branch is not empty."""
        if not self.main_branch or not self.main_branch.strip():
            raise ValueError("main_branch cannot be empty")
        self.main_branch = self.main_branch.strip()

    def _validate_protected_branches(self):
        """Validate protected_branches and make sure main_branch is in it."""
        if not isinstance(self.protected_branches, list):
            raise ValueError("protected_branches must be a list")
        if self.main_branch not in self.protected_branches:
            self.protected_branches.append(self.main_branch)

    def _validate_remote_name(self):
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")

    def _validate_env_file_prefix(self):
        if not self.env_file_prefix:
            raise ValueError("env_file_prefix cannot be empty")

    def _validate_install_command(self):
        """Accept a string command and split it into arguments."""
        if isinstance(self.install_command, str):
            self.install_command = self.install_command.split()
        if not self.install_command:
            raise ValueError("install_command cannot be empty")

    def get_worktree_parent(self) -> Path:
        """Directory that holds every secondary worktree."""
        if self.worktree_parent:
            return Path(self.worktree_parent).expanduser()
        return Path.home() / DEFAULT_WORKTREE_DIRNAME

    def is_protected(self, branch_name: str) -> bool:
        return branch_name in self.protected_branches

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "worktree_parent": self.worktree_parent,
            "main_branch": self.main_branch,
            "protected_branches": self.protected_branches,
            "remote_name": self.remote_name,
            "env_file_prefix": self.env_file_prefix,
            "excluded_dirs": self.excluded_dirs,
            "install_command": self.install_command,
            "open_command": self.open_command,
            "copy_env": self.copy_env,
            "install_deps": self.install_deps,
            "quiet": self.quiet,
            "show_status": self.show_status,
            "cleanup_all": self.cleanup_all,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        unknown = set(config_dict) - known_fields
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**filtered)


def get_config_path() -> Path:
    """Location of the optional JSON config file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_FILENAME


def load_config(path: Optional[Union[str, Path]] = None, **overrides) -> Config:
    """Load configuration from a JSON file and apply overrides on top.

    A missing file yields the defaults. Overrides set to None are skipped so
    CLI flags that were not given do not clobber file values.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid values
    """
    config_path = Path(path) if path else get_config_path()
    values: dict = {}

    if config_path.is_file():
        try:
            with open(config_path, encoding="utf-8") as f:
                values = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {config_path}: {e}") from e
        if not isinstance(values, dict):
            raise ValueError(f"Invalid config file {config_path}: expected a JSON object")
        logger.debug(f"Loaded config from {config_path}")

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Config.from_dict(values)
