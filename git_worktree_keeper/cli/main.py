"""Entry points for git-worktree-keeper"""

import os
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.cli.args import CREATE, LIST, MERGE, UsageError, WorktreeRequest, parse_args
from git_worktree_keeper.config import Config, load_config
from git_worktree_keeper.core import WorktreeCreator, WorktreeInspector, WorktreeMerger
from git_worktree_keeper.exceptions import GitWorktreeKeeperError, MergeConflictError
from git_worktree_keeper.logging_config import get_logger, setup_logging
from git_worktree_keeper.services.git import resolve_repository

console = Console()
logger = get_logger(__name__)

SUBCOMMANDS = {
    "create": CREATE,
    "list": LIST,
    "merge": MERGE,
}


def build_config(request: WorktreeRequest) -> Config:
    """Load the config file and apply the flags given on the command line."""
    return load_config(
        install_deps=request.install_deps or None,
        copy_env=False if not request.copy_env else None,
        quiet=request.quiet or None,
        show_status=False if not request.show_status else None,
        debug=request.debug or None,
        cleanup_all=request.cleanup_all or None,
        verbose=request.verbose or None,
    )


def execute(request: WorktreeRequest, config: Config, cwd: Optional[str] = None) -> int:
    """Run a parsed request against the repository containing `cwd`."""
    context = resolve_repository(cwd or os.getcwd(), config)

    if request.command == CREATE:
        WorktreeCreator(context, config).create_all(request.branches)
        # Per-branch failures are reported, not turned into an exit status
        return 0
    if request.command == LIST:
        return WorktreeInspector(context, config).run()
    if request.command == MERGE:
        WorktreeMerger(context, config).merge(request.branches[0])
        return 0
    raise ValueError(f"Unknown command: {request.command}")


def run(command: str, argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments for `command`, run it and return the exit status."""
    debug = False
    try:
        request = parse_args(command, argv)
        debug = request.debug
        config = build_config(request)
        setup_logging(verbose=config.verbose, debug=config.debug)
        if config.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            for key, value in config.to_dict().items():
                logger.debug(f"config {key}: {value}")
        return execute(request, config)
    except UsageError as e:
        if e.message:
            console.print(f"[red]Error: {escape(e.message)}[/red]")
        console.print(escape(e.usage), highlight=False)
        return 1
    except MergeConflictError as e:
        if e.output:
            console.print(escape(e.output), highlight=False)
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 1
    except (GitWorktreeKeeperError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if debug:
            console.print_exception()
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1


def create_worktrees(argv: Optional[Sequence[str]] = None) -> int:
    """Console script: create-worktrees."""
    return run(CREATE, argv)


def list_worktrees(argv: Optional[Sequence[str]] = None) -> int:
    """Console script: list-worktrees."""
    return run(LIST, argv)


def merge_worktree(argv: Optional[Sequence[str]] = None) -> int:
    """Console script: merge-worktree."""
    return run(MERGE, argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Umbrella command: git-worktree-keeper {create,list,merge} ..."""
    tokens = list(sys.argv[1:] if argv is None else argv)
    if not tokens or tokens[0] not in SUBCOMMANDS:
        console.print("Usage: git-worktree-keeper {create,list,merge} [options] [branch ...]", markup=False, highlight=False)
        return 1
    return run(SUBCOMMANDS[tokens[0]], tokens[1:])


if __name__ == "__main__":
    sys.exit(main())
