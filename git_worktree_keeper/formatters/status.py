"""Worktree state formatting utilities (rich markup)."""

from rich.markup import escape

from git_worktree_keeper.constants import (
    SYMBOL_AHEAD,
    SYMBOL_BEHIND,
    SYMBOL_DIRTY,
    SYMBOL_DIVERGED,
    SYMBOL_OK,
    SYMBOL_UNPUSHED,
)
from git_worktree_keeper.models.worktree import MainLineState, RemoteState, WorktreeRecord


def format_state(record: WorktreeRecord) -> str:
    """
    Describe how a worktree relates to the main working tree.

    Args:
        record: Classified worktree

    Returns:
        Markup text such as "✨ 3 new commit(s)"
    """
    state = record.state
    if state == MainLineState.IDENTICAL:
        return f"[bold green]{SYMBOL_OK} identical to main[/bold green]"
    if state == MainLineState.AHEAD:
        return f"[bold yellow]{SYMBOL_AHEAD} {record.ahead} new commit(s)[/bold yellow]"
    if state == MainLineState.BEHIND:
        return f"[bold cyan]{SYMBOL_BEHIND} behind main by {record.behind} commit(s)[/bold cyan]"
    if state == MainLineState.DIVERGED:
        return f"[bold yellow]{SYMBOL_DIVERGED} diverged from main[/bold yellow]"
    if state == MainLineState.UNCOMMITTED:
        return f"[bold red]{SYMBOL_DIRTY} uncommitted changes[/bold red]"
    if state == MainLineState.STAGED:
        return f"[bold red]{SYMBOL_DIRTY} staged changes[/bold red]"
    if state == MainLineState.INACCESSIBLE:
        return f"[bold white]{SYMBOL_DIRTY} directory not accessible[/bold white]"
    return "state not checked"


def format_remote_annotation(record: WorktreeRecord) -> str:
    """Suffix describing the remote relationship; empty when nothing to say."""
    if record.remote_state == RemoteState.TRACKED and record.unpushed > 0:
        return f" [bold yellow](unpushed changes {SYMBOL_UNPUSHED})[/bold yellow]"
    if record.remote_state == RemoteState.LOCAL_ONLY:
        return " [dim](local only)[/dim]"
    return ""


def format_full_state(record: WorktreeRecord) -> str:
    """Main-line state plus remote annotation."""
    if record.state == MainLineState.IDENTICAL and record.remote_state == RemoteState.LOCAL_ONLY:
        return f"[bold green]{SYMBOL_OK} clean[/bold green] [dim](local only)[/dim]"
    return format_state(record) + format_remote_annotation(record)


def format_worktree_line(record: WorktreeRecord, show_status: bool) -> str:
    """Headline for one worktree: `[branch] branch (current) - state`."""
    branch = escape(record.branch_name)
    marker = " (current)" if record.is_current else ""
    line = f"[bold blue]\\[{branch}][/bold blue] [bold yellow]{branch}[/bold yellow]{marker}"
    if show_status:
        line += f" - {format_full_state(record)}"
    return line
