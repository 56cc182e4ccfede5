"""External helper commands: dependency install and the editor/terminal opener."""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def install_dependencies(command: List[str], cwd: Path) -> tuple[bool, Optional[str]]:
    """Run the package manager's install step inside `cwd`.

    Returns:
        Tuple of (success, error_message). error_message is None on success.
    """
    logger.debug(f"Running {' '.join(command)} in {cwd}")
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        return False, f"Could not run '{' '.join(command)}': {e}"

    if result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        message = f"'{' '.join(command)}' exited with {result.returncode}"
        if output:
            message += f": {output.splitlines()[-1]}"
        return False, message
    return True, None


def open_in_editor(command: Optional[str], path: Path) -> bool:
    """Open `path` with the helper command when it is on PATH.

    Failures are logged and otherwise ignored.

    Returns:
        True if the helper ran successfully
    """
    if not command:
        return False
    executable = shutil.which(command)
    if not executable:
        logger.debug(f"Helper command '{command}' not found on PATH")
        return False
    try:
        result = subprocess.run(
            [executable, str(path)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Helper command '{command}' failed: {e}")
        return False
    if result.returncode != 0:
        logger.debug(f"Helper command '{command}' exited with {result.returncode}")
        return False
    return True
