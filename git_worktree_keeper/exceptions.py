"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class GitWorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(GitWorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NotARepositoryError(GitWorktreeKeeperError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class WorktreeDirectoryError(GitWorktreeKeeperError):
    """Raised when the worktree parent directory cannot be created."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Failed to create worktree parent directory: {path}"
        if message:
            error_msg += f" ({message})"
        super().__init__(error_msg)


class WorktreeNotFoundError(GitWorktreeKeeperError):
    """Raised when no registered worktree exists for a branch."""

    def __init__(self, branch: str, parent: str):
        self.branch = branch
        self.parent = parent
        super().__init__(f"No active worktree found for branch '{branch}' under {parent}.")


class AutoCommitError(GitOperationError):
    """Raised when pending changes could not be committed before a merge."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("auto_commit", branch, message)


class BranchSwitchError(GitOperationError):
    """Raised when the main worktree cannot be switched to the main branch."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("checkout", branch, message)


class MergeConflictError(GitOperationError):
    """Raised when merging a worktree branch into the main branch fails."""

    def __init__(self, branch: str, output: Optional[str] = None):
        self.output = output
        super().__init__("merge", branch, "Merge failed. Please resolve conflicts and try again.")
