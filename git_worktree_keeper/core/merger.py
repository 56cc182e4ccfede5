"""Merge a worktree branch into the main branch."""

import os
from typing import List, Optional

import git
from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import AUTO_COMMIT_MESSAGE, MERGE_MESSAGE
from git_worktree_keeper.exceptions import (
    AutoCommitError,
    BranchSwitchError,
    GitOperationError,
    MergeConflictError,
    WorktreeNotFoundError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.git import BranchQueries, RepositoryContext, WorktreeService
from git_worktree_keeper.services.git.worktrees import describe_git_error

console = Console()
logger = get_logger(__name__)


class WorktreeMerger:
    """Merges one worktree branch into the main branch of the main working tree."""

    def __init__(
        self,
        context: RepositoryContext,
        config: Config,
        output: Optional[Console] = None,
    ):
        self.context = context
        self.config = config
        self.console = output or console
        self.worktree_service = WorktreeService(str(context.main_root))
        self.branch_queries = BranchQueries(str(context.main_root), config.remote_name)

    def _get_main_repo(self):
        return git.Repo(str(self.context.main_root))

    def managed_worktrees(self) -> List[WorktreeInfo]:
        """Registered worktrees that follow the <parent>/<repo>-<branch> convention."""
        return [
            wt for wt in self.worktree_service.get_worktree_info()
            if not wt.is_main and self.context.is_managed_path(wt.path)
        ]

    def merge(self, branch: str) -> None:
        """Auto-commit, switch the main tree to the main branch and merge `branch`.

        Raises:
            WorktreeNotFoundError: If `branch` has no registered worktree
            AutoCommitError: If pending changes could not be committed
            BranchSwitchError: If the main branch cannot be checked out
            MergeConflictError: If the merge fails
        """
        main_branch = self.config.main_branch
        worktrees = self.managed_worktrees()
        target_path = os.path.realpath(self.context.worktree_path(branch))
        target = next(
            (wt for wt in worktrees if os.path.realpath(wt.path) == target_path), None
        )
        if target is None:
            raise WorktreeNotFoundError(branch, str(self.context.worktree_parent))

        self._auto_commit(branch, target.path)

        self.console.print(f"Switching to '{escape(main_branch)}' branch in the main worktree...")
        repo = self._get_main_repo()
        try:
            repo.git.checkout(main_branch)
        except git.exc.GitCommandError as e:
            raise BranchSwitchError(main_branch, describe_git_error(e, "checkout"))

        self.console.print(f"Merging branch '{escape(branch)}' into '{escape(main_branch)}'...")
        # stdout and stderr are kept exactly as git printed them
        status, output, errors = repo.git.merge(
            branch, "-m", MERGE_MESSAGE.format(branch=branch),
            with_extended_output=True, with_exceptions=False,
        )
        if status != 0:
            details = "\n".join(part for part in (output, errors) if part)
            raise MergeConflictError(branch, details or f"git merge exited with {status}")
        if output:
            self.console.print(escape(output))

        self.console.print(
            f"[bold green]Successfully merged branch '{escape(branch)}' into '{escape(main_branch)}'.[/bold green]"
        )

        if self.config.cleanup_all:
            self.console.print(
                "Cleanup flag detected. Cleaning up worktrees and deleting temporary branches..."
            )
            self.cleanup(worktrees)
            self.console.print(
                f"Merge and cleanup complete: Branch '{escape(branch)}' merged into "
                f"'{escape(main_branch)}', and all worktrees cleaned up."
            )
        else:
            self.console.print(
                f"Merge complete: Branch '{escape(branch)}' merged into "
                f"'{escape(main_branch)}'. Other worktrees preserved."
            )

    def _auto_commit(self, branch: str, path: str) -> None:
        """Commit pending changes in the worktree before merging."""
        self.console.print(f"Checking for uncommitted changes in worktree for branch '{escape(branch)}'...")
        try:
            status = self.worktree_service.get_worktree_status_details(path)
        except GitOperationError as e:
            raise AutoCommitError(branch, e.message or str(e))

        if not status.has_uncommitted:
            self.console.print(f"No uncommitted changes found in branch '{escape(branch)}'.")
            return

        self.console.print(f"Changes detected in branch '{escape(branch)}'. Attempting auto-commit...")
        try:
            self.worktree_service.commit_all(path, AUTO_COMMIT_MESSAGE.format(branch=branch))
        except GitOperationError as e:
            raise AutoCommitError(branch, e.message or str(e))
        self.console.print(f"Auto-commit successful in branch '{escape(branch)}'.")

    def cleanup(self, worktrees: List[WorktreeInfo]) -> None:
        """Remove every given worktree and delete its branch, tolerating failures."""
        for wt in worktrees:
            branch = self.context.branch_from_path(wt.path) or wt.branch_name
            self.console.print(
                f"Processing worktree for branch '{escape(branch)}' at {escape(wt.path)}..."
            )
            removed, error = self.worktree_service.remove_worktree(wt.path, force=True)
            if removed:
                self.console.print(f"Worktree at {escape(wt.path)} removed.")
            else:
                self.console.print(
                    f"[yellow]Warning: Failed to remove worktree at {escape(wt.path)}: {escape(error or '')}[/yellow]"
                )

            if self.config.is_protected(branch):
                logger.debug(f"Keeping protected branch {branch}")
                continue

            deleted, error = self.branch_queries.delete_branch(branch)
            if deleted:
                self.console.print(f"Branch '{escape(branch)}' deleted.")
            else:
                self.console.print(
                    f"[yellow]Warning: Failed to delete branch '{escape(branch)}': {escape(error or '')}[/yellow]"
                )
