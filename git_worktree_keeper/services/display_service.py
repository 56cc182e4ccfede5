"""Display service for worktree listings"""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.constants import SEPARATOR
from git_worktree_keeper.formatters import format_worktree_line
from git_worktree_keeper.models.worktree import WorktreeInfo, WorktreeRecord

console = Console()


class DisplayService:
    """Renders worktree listings and debug traces to the console."""

    def __init__(self, debug: bool = False, output: Optional[Console] = None):
        self.debug_mode = debug
        self.console = output or console

    def debug(self, message: str) -> None:
        """Print a debug trace line when --debug is active."""
        if self.debug_mode:
            self.console.print(f"[dim]DEBUG: {escape(message)}[/dim]")

    def show_header(self, repo_name: str) -> None:
        self.console.print(f"[bold cyan]=== Worktrees for repository '{escape(repo_name)}' ===[/bold cyan]")
        self.console.print(f"[dim]{SEPARATOR}[/dim]")

    def show_main(self, main: WorktreeInfo, is_current: bool) -> None:
        branch = escape(main.branch_name or "(detached)")
        marker = " (current)" if is_current else ""
        self.console.print(f"[bold green]\\[MAIN][/bold green] [bold yellow]{branch}[/bold yellow]{marker}")
        self.console.print(f"    Path: {escape(main.path)}")

    def show_record(self, record: WorktreeRecord, show_status: bool) -> None:
        self.console.print(format_worktree_line(record, show_status))
        self.console.print(f"    Path: {escape(record.path)}")

    def show_summary(self, main_count: int, records: List[WorktreeRecord]) -> None:
        self.console.print(f"[dim]{SEPARATOR}[/dim]")
        self.console.print(
            f"Found {main_count} main worktree(s) and {len(records)} additional worktree(s)"
        )

    def show_cleanup_instructions(self, records: List[WorktreeRecord]) -> None:
        example = escape(records[0].branch_name) if records else "test-wt"
        self.console.print(f"[dim]{SEPARATOR}[/dim]")
        self.console.print(
            "[bold cyan]To clean up worktrees, enter the branch names shown in \\[brackets].[/bold cyan]"
        )
        self.console.print(
            f"[bold cyan]Example: to remove \\[{example}], type '{example}'[/bold cyan]"
        )
