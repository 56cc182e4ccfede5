"""Copy environment files from the main repository into a new worktree."""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CopyResult:
    """Outcome of copying environment files into a worktree."""

    found: int = 0
    copied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class EnvFileService:
    """Finds files named like `.env*` and copies them to a worktree."""

    def __init__(self, prefix: str, excluded_dirs: Iterable[str]):
        self.prefix = prefix
        self.excluded_dirs = set(excluded_dirs)

    def discover(self, root: Path) -> List[Path]:
        """Environment files under `root`, as paths relative to it.

        Directories whose name is excluded are never descended into.
        """
        found = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.excluded_dirs)
            for filename in sorted(filenames):
                if not filename.startswith(self.prefix):
                    continue
                full_path = Path(dirpath) / filename
                if full_path.is_file():
                    found.append(full_path.relative_to(root))
        logger.debug(f"Found {len(found)} environment files under {root}")
        return found

    def copy_to(self, source_root: Path, target_root: Path) -> CopyResult:
        """Copy every environment file of `source_root` to the same place under `target_root`.

        Files already present at the destination are skipped, never overwritten.
        A file that cannot be copied counts as skipped.
        """
        result = CopyResult()
        env_files = self.discover(source_root)
        result.found = len(env_files)

        for rel_path in env_files:
            target_file = target_root / rel_path
            if target_file.exists():
                logger.debug(f"Skipping existing {target_file}")
                result.skipped.append(str(rel_path))
                continue
            try:
                target_file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source_root / rel_path, target_file)
            except OSError as e:
                logger.warning(f"Could not copy {rel_path} to {target_root}: {e}")
                result.skipped.append(str(rel_path))
                continue
            result.copied.append(str(rel_path))

        return result
