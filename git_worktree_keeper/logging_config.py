"""Diagnostic logging for the worktree commands.

User-facing progress goes through rich consoles; this module only wires the
standard logging tree that services write their traces to.
"""
import logging
import sys
from pathlib import Path

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
SHORT_FORMAT = '[%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILENAME = 'git-worktree-keeper.log'


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color when stderr is a TTY."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelname)
        if color and sys.stderr.isatty():
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def get_log_dir() -> Path:
    """Where --debug runs leave their log file."""
    return Path.home() / '.git-worktree-keeper'


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _open_debug_file() -> logging.Handler:
    """Handler writing every record of this run to the debug log (truncated per run)."""
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILENAME, mode='w')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Replace the root logger's handlers for one command run.

    Args:
        verbose: Let INFO records through to stderr
        debug: Let DEBUG records through, use timestamps, and mirror
            everything into the debug log file
    """
    level = _level_for(verbose, debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if debug:
        try:
            root_logger.addHandler(_open_debug_file())
        except OSError as e:
            sys.stderr.write(f"Could not open debug log file: {e}\n")

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    if debug:
        stderr_handler.setFormatter(ColoredFormatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    else:
        stderr_handler.setFormatter(ColoredFormatter(fmt=SHORT_FORMAT))
    root_logger.addHandler(stderr_handler)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the package and `services.` prefixes.

    `git_worktree_keeper.services.git.worktrees` logs as `git.worktrees`.
    """
    for prefix in ('git_worktree_keeper.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
