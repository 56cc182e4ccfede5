"""Command-line argument parsing for git-worktree-keeper."""

import argparse
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

CREATE = "create-worktrees"
LIST = "list-worktrees"
MERGE = "merge-worktree"


class UsageError(Exception):
    """Raised when the arguments cannot satisfy a command."""

    def __init__(self, usage: str, message: Optional[str] = None):
        self.usage = usage
        self.message = message
        super().__init__(message or usage)


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(self.format_help(), message)


@dataclass
class WorktreeRequest:
    """Structured form of a command line."""

    command: str
    branches: List[str] = field(default_factory=list)
    install_deps: bool = False
    copy_env: bool = True
    quiet: bool = False
    show_status: bool = True
    debug: bool = False
    cleanup_all: bool = False
    verbose: bool = False


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose log output")
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")


def build_create_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog=CREATE,
        description="Create a new worktree for each given branch under the worktree directory",
    )
    parser.add_argument(
        "-p", "--install-deps", "--pnpm",
        dest="install_deps",
        action="store_true",
        help="Run the package manager install step in each new worktree",
    )
    parser.add_argument(
        "-n", "--no-env",
        dest="no_env",
        action="store_true",
        help="Skip copying environment files from the main repository",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Show minimal output (only errors and final path)"
    )
    _add_common_arguments(parser)
    parser.add_argument("branches", nargs="*", metavar="branch", help="Branches to create worktrees for")
    return parser


def build_list_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog=LIST,
        description="List worktrees of the current repository and optionally clean them up",
    )
    parser.add_argument(
        "-n", "--no-status",
        dest="no_status",
        action="store_true",
        help="Hide git status for each worktree",
    )
    parser.add_argument(
        "-s", "--status",
        dest="status",
        action="store_true",
        help="Show git status for each worktree (default)",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Show detailed output about worktree detection"
    )
    _add_common_arguments(parser)
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def build_merge_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog=MERGE,
        description="Merge changes from a worktree branch into the main branch",
    )
    parser.add_argument(
        "--cleanup-all",
        action="store_true",
        help="Also remove all worktrees and their branches after merging",
    )
    _add_common_arguments(parser)
    parser.add_argument("branches", nargs="*", metavar="branch", help="Branch to merge")
    return parser


PARSERS = {
    CREATE: build_create_parser,
    LIST: build_list_parser,
    MERGE: build_merge_parser,
}


def parse_args(command: str, argv: Optional[Sequence[str]] = None) -> WorktreeRequest:
    """Turn a flat token list into a WorktreeRequest.

    Flags may be mixed freely with branch names. Unknown options are ignored
    with a warning.

    Raises:
        UsageError: If a command that needs branches got none, or merge got more than one
    """
    parser = PARSERS[command]()
    tokens = list(sys.argv[1:] if argv is None else argv)
    args, unknown = parser.parse_known_intermixed_args(tokens)
    for token in unknown:
        logger.warning(f"Ignoring unrecognized option: {token}")

    request = WorktreeRequest(command=command, verbose=args.verbose)

    if command == CREATE:
        request.branches = args.branches
        request.install_deps = args.install_deps
        request.copy_env = not args.no_env
        request.quiet = args.quiet
        if not request.branches:
            raise UsageError(parser.format_help(), "at least one branch is required")
    elif command == LIST:
        request.show_status = not args.no_status
        request.debug = args.debug
        if args.extra:
            logger.warning(f"Ignoring unexpected arguments: {' '.join(args.extra)}")
    elif command == MERGE:
        request.branches = args.branches
        request.cleanup_all = args.cleanup_all
        if len(request.branches) != 1:
            message = "exactly one branch is required" if request.branches else "a branch is required"
            raise UsageError(parser.format_help(), message)

    return request
