"""Repository and worktree directory resolution."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import git

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import NotARepositoryError, WorktreeDirectoryError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RepositoryContext:
    """Everything a command needs to know about the repository it runs in."""

    root: Path  # Top level of the invoking working tree
    main_root: Path  # Top level of the main working tree
    name: str
    worktree_parent: Path
    current_branch: str  # "HEAD" when detached

    def worktree_path(self, branch_name: str) -> Path:
        """Path of the worktree for `branch_name`: <parent>/<repo>-<branch>."""
        return self.worktree_parent / f"{self.name}-{branch_name}"

    @property
    def worktree_prefix(self) -> str:
        """Path prefix shared by every worktree of this repository."""
        return str(self.worktree_parent / f"{self.name}-")

    def is_managed_path(self, path: Union[str, Path]) -> bool:
        """True if `path` follows the naming convention of this repository."""
        return os.path.realpath(path).startswith(self.worktree_prefix)

    def branch_from_path(self, path: Union[str, Path]) -> Optional[str]:
        """Recover a branch name from a worktree path, if it follows the convention."""
        real = os.path.realpath(path)
        if not real.startswith(self.worktree_prefix):
            return None
        branch = real[len(self.worktree_prefix):]
        return branch or None


def ensure_worktree_parent(parent: Path) -> Path:
    """Create the worktree parent directory if needed and return its real path.

    Raises:
        WorktreeDirectoryError: If the directory cannot be created
    """
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorktreeDirectoryError(str(parent), e.strerror or str(e)) from e
    if not parent.is_dir():
        raise WorktreeDirectoryError(str(parent), "not a directory")
    return Path(os.path.realpath(parent))


def resolve_repository(start: Union[str, Path], config: Config) -> RepositoryContext:
    """Resolve the repository enclosing `start` and the worktree parent directory.

    Raises:
        NotARepositoryError: If `start` is not inside a git working tree
        WorktreeDirectoryError: If the parent directory cannot be created
    """
    try:
        repo = git.Repo(start, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise NotARepositoryError(str(start)) from e

    if repo.bare or not repo.working_tree_dir:
        raise NotARepositoryError(str(start))

    root = Path(os.path.realpath(repo.working_tree_dir))
    # common_dir is the main tree's .git, also when invoked from a linked worktree
    main_root = Path(os.path.realpath(os.path.dirname(os.path.normpath(repo.common_dir))))

    try:
        current_branch = repo.active_branch.name
    except TypeError:
        # Detached HEAD
        current_branch = "HEAD"

    parent = ensure_worktree_parent(config.get_worktree_parent())

    context = RepositoryContext(
        root=root,
        main_root=main_root,
        name=main_root.name,
        worktree_parent=parent,
        current_branch=current_branch,
    )
    logger.debug(f"Resolved repository: {context}")
    return context
