"""List worktrees, classify them against the main tree and offer cleanup."""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import UNKNOWN_BRANCH
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import (
    BranchSource,
    MainLineState,
    RemoteState,
    WorktreeInfo,
    WorktreeRecord,
)
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import BranchQueries, RepositoryContext, WorktreeService
from git_worktree_keeper.services.prompt import ConsolePrompter, Prompter

console = Console()
logger = get_logger(__name__)


class WorktreeInspector:
    """Lists the worktrees of a repository and removes the ones the user picks."""

    def __init__(
        self,
        context: RepositoryContext,
        config: Config,
        prompter: Optional[Prompter] = None,
        output: Optional[Console] = None,
    ):
        self.context = context
        self.config = config
        self.console = output or console
        self.prompter = prompter or ConsolePrompter(self.console)
        self.worktree_service = WorktreeService(str(context.main_root))
        self.branch_queries = BranchQueries(str(context.main_root), config.remote_name)
        self.display = DisplayService(debug=config.debug, output=self.console)

    def is_current(self, path: str) -> bool:
        """True if `path` is the working tree the command was started from."""
        return Path(os.path.realpath(path)) == self.context.root

    def resolve_branch(self, info: WorktreeInfo) -> Tuple[str, BranchSource]:
        """Work out which branch a worktree holds.

        Tried in order: the registration record, a live query inside the
        tree, the naming convention of the directory, then "unknown".
        """
        if info.branch_name:
            return info.branch_name, BranchSource.REGISTRATION

        branch = self.worktree_service.query_branch(info.path)
        if branch:
            self.display.debug(f"Branch from git: {branch}")
            return branch, BranchSource.LIVE_QUERY

        branch = self.context.branch_from_path(info.path)
        if branch:
            self.display.debug(f"Branch from directory name: {branch}")
            return branch, BranchSource.DIRECTORY_NAME

        return UNKNOWN_BRANCH, BranchSource.UNKNOWN

    def collect(self) -> Tuple[Optional[WorktreeInfo], int, List[WorktreeRecord]]:
        """Gather the main tree, the number of main-line trees and the actionable records.

        Raises:
            GitOperationError: If the worktree registration cannot be read
        """
        worktrees = self.worktree_service.get_worktree_info()
        if not worktrees:
            return None, 0, []

        main = worktrees[0]
        main_count = 1
        records = []

        for info in worktrees[1:]:
            self.display.debug(f"Processing worktree: {info}")
            branch, source = self.resolve_branch(info)

            if self.config.is_protected(branch):
                self.display.debug(f"Skipping protected branch: {branch}")
                main_count += 1
                continue

            if not self.context.is_managed_path(info.path):
                self.display.debug(f"Skipping worktree outside {self.context.worktree_parent}: {info.path}")
                continue

            record = WorktreeRecord(
                path=info.path,
                branch_name=branch,
                branch_source=source,
                is_current=self.is_current(info.path),
            )
            if self.config.show_status:
                self.inspect(record, info, main.commit_sha)
            records.append(record)
            self.display.debug(f"Added worktree: {record.path} ({record.branch_name}) - {record.state.value}")

        return main, main_count, records

    def inspect(self, record: WorktreeRecord, info: WorktreeInfo, main_sha: str) -> None:
        """Fill in the main-line and remote state of `record`."""
        if info.is_orphaned or not os.path.isdir(info.path):
            record.state = MainLineState.INACCESSIBLE
            self.display.debug("Directory not accessible")
            return

        try:
            status = self.worktree_service.get_worktree_status_details(info.path)
            if status.has_uncommitted:
                record.is_dirty = True
                record.state = MainLineState.UNCOMMITTED if status.modified else MainLineState.STAGED
                self.display.debug(f"Has changes: {record.state.value}")
                return

            worktree_sha = info.commit_sha or self.worktree_service.get_head_sha(info.path)
            self.display.debug(f"Main commit: {main_sha}")
            self.display.debug(f"Worktree commit: {worktree_sha}")
            if not main_sha:
                self.display.debug("Main worktree has no commit to compare against")
                return

            record.state, record.ahead, record.behind = self.branch_queries.compare_with_main(
                main_sha, worktree_sha
            )
            self.display.debug(
                f"State vs main: {record.state.value} (ahead {record.ahead}, behind {record.behind})"
            )
        except GitOperationError as e:
            self.console.print(
                f"[bold red]Could not inspect worktree '{escape(record.branch_name)}' "
                f"at {escape(record.path)}: {escape(str(e))}[/bold red]"
            )
            return

        if self.branch_queries.has_remote_branch(record.branch_name):
            record.remote_state = RemoteState.TRACKED
            record.unpushed, record.unpulled = self.branch_queries.get_remote_divergence(record.branch_name)
            self.display.debug(
                f"Branch exists on remote, {record.unpushed} unpushed and {record.unpulled} unpulled commit(s)"
            )
        else:
            record.remote_state = RemoteState.LOCAL_ONLY
            self.display.debug("Branch is local only")

    def run(self) -> int:
        """List worktrees, then prompt for the ones to remove.

        Returns:
            Process exit code
        """
        self.console.print("Gathering worktree information...")
        if self.config.debug:
            self.display.debug(f"Repository root: {self.context.main_root}")
            self.display.debug(f"Repository name: {self.context.name}")
            self.display.debug("Raw git worktree list output:")
            self.display.debug(self.worktree_service.get_raw_listing())
            self.display.debug(f"Current worktree: {self.context.root}")

        main, main_count, records = self.collect()

        self.display.show_header(self.context.name)
        if main is not None:
            self.display.show_main(main, self.is_current(main.path))
        for record in records:
            self.display.show_record(record, self.config.show_status)
        self.display.show_summary(main_count, records)

        if not records:
            self.console.print("No additional worktrees found for cleanup.")
            return 0

        self.display.show_cleanup_instructions(records)
        selection = self.prompter.ask(
            "Enter branch names to clean up (space-separated), or press Enter to exit: "
        )
        branches = selection.split()
        if not branches:
            self.console.print("No worktrees selected for cleanup. Exiting.")
            return 0

        for branch in branches:
            self.remove(branch)

        self.console.print("[bold green]Cleanup complete.[/bold green]")
        return 0

    def find_worktree_path(self, branch: str) -> Optional[str]:
        """Path of the worktree for `branch`: registration first, then the naming convention."""
        info = self.worktree_service.find_by_branch(branch)
        if info is not None:
            return info.path
        candidate = self.context.worktree_path(branch)
        if candidate.is_dir():
            return str(candidate)
        return None

    def remove(self, branch: str) -> bool:
        """Remove the worktree of `branch` and delete the branch.

        Returns:
            True if the worktree directory is gone afterwards
        """
        if self.config.is_protected(branch):
            self.console.print(
                f"[bold red]Cannot remove protected branch '{escape(branch)}'. Skipping.[/bold red]"
            )
            return False

        try:
            branch_path = self.find_worktree_path(branch)
        except GitOperationError as e:
            self.console.print(f"[bold red]Could not look up '{escape(branch)}': {escape(str(e))}[/bold red]")
            return False

        if branch_path is None:
            self.console.print(f"[bold red]No worktree found for branch '{escape(branch)}'. Skipping.[/bold red]")
            return False

        if self.is_current(branch_path) or Path(os.path.realpath(branch_path)) == self.context.main_root:
            self.console.print(
                f"[bold red]Cannot remove current worktree at {escape(branch_path)}. Skipping.[/bold red]"
            )
            return False

        self.console.print(
            f"[bold cyan]Cleaning up worktree for branch '{escape(branch)}' at {escape(branch_path)}...[/bold cyan]"
        )

        if not self._confirm_if_dirty(branch, branch_path):
            self.console.print(f"Skipping worktree for branch '{escape(branch)}'.")
            return False

        removed, error = self.worktree_service.remove_worktree(branch_path, force=True)
        if removed:
            self.console.print(f"[bold green]Worktree at {escape(branch_path)} removed.[/bold green]")
        else:
            self.console.print(
                f"[bold yellow]Warning: Failed to remove worktree at {escape(branch_path)}: {escape(error or '')}[/bold yellow]"
            )
            if not self._remove_directory(branch_path):
                return False

        self._delete_branch(branch)
        return True

    def _confirm_if_dirty(self, branch: str, branch_path: str) -> bool:
        """Ask before removing a worktree with uncommitted changes."""
        try:
            status = self.worktree_service.get_worktree_status_details(branch_path)
        except GitOperationError as e:
            logger.debug(f"Could not check status of {branch_path}: {e}")
            return True
        if not status.has_uncommitted:
            return True
        self.console.print("[bold yellow]Warning: This worktree has uncommitted changes.[/bold yellow]")
        return self.prompter.confirm(f"Are you sure you want to remove '{escape(branch)}'?")

    def _remove_directory(self, branch_path: str) -> bool:
        """Delete a worktree directory directly and drop its stale registration."""
        self.console.print("Attempting manual directory removal...")
        try:
            shutil.rmtree(branch_path)
        except OSError as e:
            self.console.print(
                f"[bold red]Error: Failed to manually remove directory {escape(branch_path)}: {escape(str(e))}[/bold red]"
            )
            return False
        self.console.print(f"[bold green]Directory {escape(branch_path)} manually removed.[/bold green]")

        pruned, error = self.worktree_service.prune_worktrees()
        if not pruned:
            self.console.print(f"[bold yellow]Warning: {escape(error or 'git worktree prune failed')}[/bold yellow]")
        return True

    def _delete_branch(self, branch: str) -> None:
        self.console.print(f"Deleting branch '{escape(branch)}'...")
        deleted, error = self.branch_queries.delete_branch(branch)
        if deleted:
            self.console.print(f"[bold green]Branch '{escape(branch)}' deleted.[/bold green]")
        else:
            self.console.print(
                f"[bold yellow]Warning: Failed to delete branch '{escape(branch)}': {escape(error or '')}[/bold yellow]"
            )
