"""Worktree registration service for git-worktree-keeper."""

import os
from typing import Optional, Dict, Any, List

import git

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import FileStatus, WorktreeInfo

logger = get_logger(__name__)


def describe_git_error(e: git.exc.GitCommandError, operation: str) -> str:
    """Build a readable message from a GitCommandError."""
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else str(e)).strip()
    status = e.status if hasattr(e, "status") else "unknown"
    if stderr:
        return f"git {operation} failed (exit {status}): {stderr}"
    return f"git {operation} failed with exit code {status}"


def parse_worktree_porcelain(output: str) -> List[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
        (blank line between worktrees)

    The first entry is always the main working tree.
    """
    worktree_list: List[WorktreeInfo] = []
    current: Dict[str, Any] = {}

    def flush():
        path = current.get("path", "")
        if path:
            worktree_list.append(
                WorktreeInfo(
                    path=path,
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_main=not worktree_list,
                    is_orphaned=not os.path.exists(path),
                )
            )

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            if current:
                flush()
                current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line.startswith("detached"):
            current["branch"] = ""

    # Last entry when there is no trailing blank line
    if current:
        flush()

    return worktree_list


def parse_status_porcelain(status: str) -> FileStatus:
    """Parse `git status --porcelain` into modified/untracked/staged flags.

    Each line is `XY filename`: X is the index status, Y the working tree status.
    """
    result = FileStatus()

    for line in status.split("\n"):
        if len(line) < 2:
            continue

        if line.startswith("??"):
            result.untracked = True
            continue

        index_status = line[0]
        worktree_status = line[1]

        if index_status != " ":
            result.staged = True
        if worktree_status != " ":
            result.modified = True

    return result


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the main working tree of the repository
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Open a fresh git.Repo for the repository."""
        return git.Repo(self.repo_path)

    def _git_in(self, worktree_path: str, *args) -> str:
        """Run a git command with `worktree_path` as working tree."""
        repo = self._get_repo()
        return repo.git.execute(["git", "-C", worktree_path, *args])

    def get_worktree_info(self) -> List[WorktreeInfo]:
        """Get information about all registered worktrees, main tree first.

        Raises:
            GitOperationError: If git cannot list worktrees
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree list", message=describe_git_error(e, "worktree list"))

        worktree_list = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktree_list)} worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def get_raw_listing(self) -> str:
        """Raw porcelain listing, for debug output."""
        try:
            return self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            return describe_git_error(e, "worktree list")

    def find_by_path(self, path: str) -> Optional[WorktreeInfo]:
        """Return the registered worktree at `path`, if any."""
        target = os.path.realpath(path)
        for wt in self.get_worktree_info():
            if os.path.realpath(wt.path) == target:
                return wt
        return None

    def find_by_branch(self, branch_name: str) -> Optional[WorktreeInfo]:
        """Return the registered secondary worktree checked out to `branch_name`."""
        for wt in self.get_worktree_info():
            if not wt.is_main and wt.branch_name == branch_name:
                return wt
        return None

    def add_worktree(self, path: str, branch_name: str) -> None:
        """Materialize a new worktree at `path` checked out to `branch_name`.

        Raises:
            GitOperationError: If git refuses to create the worktree
        """
        try:
            self._get_repo().git.worktree("add", path, branch_name)
            logger.info(f"Added worktree at {path} for branch {branch_name}")
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "worktree add", branch_name, describe_git_error(e, "worktree add")
            )

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            args = ["remove", path]
            if force:
                args.append("--force")
            self._get_repo().git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree remove")
            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

    def prune_worktrees(self) -> tuple[bool, Optional[str]]:
        """Prune registration metadata of worktrees whose directory is gone.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._get_repo().git.worktree("prune")
            logger.info("Pruned orphaned worktree metadata")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree prune")
            logger.error(f"Failed to prune worktrees: {error_msg}")
            return False, error_msg

    def get_worktree_status_details(self, worktree_path: str) -> FileStatus:
        """Get file status flags of a worktree.

        Raises:
            GitOperationError: If the directory is missing or git status fails
        """
        if not os.path.exists(worktree_path):
            raise GitOperationError("status", message=f"Directory not accessible: {worktree_path}")

        try:
            status = self._git_in(worktree_path, "status", "--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("status", message=describe_git_error(e, "status"))

        return parse_status_porcelain(status)

    def query_branch(self, worktree_path: str) -> Optional[str]:
        """Ask git which branch is checked out in `worktree_path`.

        Returns None when the query fails or the tree is detached.
        """
        if not os.path.exists(os.path.join(worktree_path, ".git")):
            return None
        try:
            branch = self._git_in(worktree_path, "rev-parse", "--abbrev-ref", "HEAD").strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not query branch in {worktree_path}: {e}")
            return None
        if not branch or branch == "HEAD":
            return None
        return branch

    def get_head_sha(self, worktree_path: str) -> str:
        """Commit checked out in `worktree_path`.

        Raises:
            GitOperationError: If git cannot resolve HEAD there
        """
        try:
            return self._git_in(worktree_path, "rev-parse", "HEAD").strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-parse", message=describe_git_error(e, "rev-parse"))

    def commit_all(self, worktree_path: str, message: str) -> None:
        """Stage everything in `worktree_path` and commit it.

        Raises:
            GitOperationError: If staging or committing fails
        """
        try:
            self._git_in(worktree_path, "add", ".")
            self._git_in(worktree_path, "commit", "-m", message)
        except git.exc.GitCommandError as e:
            raise GitOperationError("commit", message=describe_git_error(e, "commit"))
