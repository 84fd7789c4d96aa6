"""Workspace Snapshot

Builds the set of file paths fed to auto-trigger matching. Paths are
relative to the workspace root and in POSIX form.
"""

import logging
import os
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = (".git", ".dart_tool", "build", "node_modules", ".idea", ".steering")
DEFAULT_MAX_FILES = 20000


def scan_workspace(
    root: Path,
    ignore: Iterable[str] = DEFAULT_IGNORE,
    max_files: int = DEFAULT_MAX_FILES,
) -> frozenset[str]:
    """
    Snapshot the files under a workspace root.

    Args:
        root: Workspace directory
        ignore: Directory names skipped wherever they appear
        max_files: Stop after this many files

    Returns:
        Relative POSIX paths of the files found
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning(f"Workspace root is not a directory: {root}")
        return frozenset()

    ignored = set(ignore)
    paths = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in ignored)
        rel_dir = Path(dirpath).relative_to(root)
        for filename in sorted(filenames):
            paths.append((rel_dir / filename).as_posix())
            if len(paths) >= max_files:
                logger.warning(
                    f"Workspace scan stopped at {max_files} files under {root}"
                )
                return frozenset(paths)

    logger.debug(f"Scanned {len(paths)} files under {root}")
    return frozenset(paths)
