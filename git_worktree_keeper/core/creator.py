"""Create one worktree per requested branch."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import (
    SYMBOL_CREATED,
    SYMBOL_ERROR,
    SYMBOL_FETCH,
    SYMBOL_INFO,
    SYMBOL_OK,
    SYMBOL_PROCESSING,
    SYMBOL_WARNING,
)
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.commands import install_dependencies, open_in_editor
from git_worktree_keeper.services.env_files import EnvFileService
from git_worktree_keeper.services.git import BranchQueries, RepositoryContext, WorktreeService

console = Console()
logger = get_logger(__name__)


class WorktreeCreator:
    """Creates worktrees under the shared parent directory.

    Every branch is handled on its own: a failure is reported and the next
    branch is processed. Nothing is rolled back.
    """

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
        self.branch_queries = BranchQueries(str(context.root), config.remote_name)
        self.env_service = EnvFileService(config.env_file_prefix, config.excluded_dirs)

    def _info(self, message: str) -> None:
        """Print progress unless running in quiet mode."""
        if not self.config.quiet:
            self.console.print(message)

    def _error(self, message: str) -> None:
        self.console.print(f"[bold red]{SYMBOL_ERROR} {message}[/bold red]")

    def create_all(self, branches: List[str]) -> List[Path]:
        """Create a worktree for each branch.

        Returns:
            Paths of the worktrees that were created
        """
        created = []
        for branch in branches:
            path = self.create(branch)
            if path is not None:
                created.append(path)
        logger.info(f"Created {len(created)} of {len(branches)} worktrees")
        return created

    def create(self, branch: str) -> Optional[Path]:
        """Create the worktree for one branch.

        Returns:
            The new worktree path, or None if the branch was skipped
        """
        target_path = self.context.worktree_path(branch)
        self._info(
            f"[bold cyan]{SYMBOL_PROCESSING} Processing branch: [/bold cyan]"
            f"[bold yellow]{escape(branch)}[/bold yellow]"
        )

        try:
            existing = self.worktree_service.find_by_path(str(target_path))
        except GitOperationError as e:
            self._error(f"Could not list worktrees for '{escape(branch)}': {escape(str(e))}")
            return None
        if existing is not None:
            self._error(f"Worktree already exists at {escape(str(target_path))}")
            return None

        if not self._ensure_branch(branch):
            return None

        self._info(f"[bold blue]{SYMBOL_INFO} Creating worktree...[/bold blue]")
        try:
            self.worktree_service.add_worktree(str(target_path), branch)
        except GitOperationError as e:
            logger.debug(str(e))
            self._error(f"Failed to create worktree for '{escape(branch)}': {escape(e.message or str(e))}")
            return None

        if self.config.copy_env:
            self._copy_env_files(target_path)

        if self.config.install_deps:
            self._install_dependencies(target_path)

        self.console.print(
            f"[bold green]{SYMBOL_CREATED} Worktree created:[/bold green] "
            f"[bold yellow]{escape(branch)}[/bold yellow] → [bold cyan]{escape(str(target_path))}[/bold cyan]"
        )
        open_in_editor(self.config.open_command, target_path)
        return target_path

    def _ensure_branch(self, branch: str) -> bool:
        """Make sure a local branch exists, tracking the remote one when there is one."""
        if self.branch_queries.has_local_branch(branch):
            logger.debug(f"Branch {branch} exists locally")
            return True

        remote = self.config.remote_name
        try:
            if self.branch_queries.has_remote_branch(branch):
                self._info(
                    f"[bold blue]{SYMBOL_FETCH} Found remote branch "
                    f"'{escape(remote)}/{escape(branch)}', setting up tracking...[/bold blue]"
                )
                self.branch_queries.create_tracking_branch(branch)
                self._info(f"[bold green]{SYMBOL_OK} Tracking branch created[/bold green]")
            else:
                self._info(
                    f"[bold blue]{SYMBOL_INFO} Creating new branch from "
                    f"'{escape(self.context.current_branch)}'...[/bold blue]"
                )
                self.branch_queries.create_branch(branch)
        except GitOperationError as e:
            logger.debug(str(e))
            self._error(escape(e.message or str(e)))
            return False
        return True

    def _copy_env_files(self, target_path: Path) -> None:
        result = self.env_service.copy_to(self.context.root, target_path)
        if result.found == 0:
            self._info(f"[bold yellow]{SYMBOL_WARNING} No environment files found[/bold yellow]")
            return
        self._info(
            f"[bold green]{SYMBOL_OK} Environment files:[/bold green] "
            f"[bold yellow]{len(result.copied)}[/bold yellow] copied, "
            f"[dim]{len(result.skipped)}[/dim] skipped"
        )

    def _install_dependencies(self, target_path: Path) -> None:
        self._info(f"[bold blue]{SYMBOL_INFO} Installing dependencies...[/bold blue]")
        success, error = install_dependencies(self.config.install_command, target_path)
        if not success:
            self._error(f"Failed to install dependencies in {escape(str(target_path))}: {escape(error or '')}")
        else:
            self._info(f"[bold green]{SYMBOL_OK} Dependencies installed[/bold green]")
