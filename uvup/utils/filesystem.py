"""
Filesystem utilities for uvup.

Everything uvup does on disk goes through this module: finding manifests,
reading them without newline translation, and replacing them atomically,
optionally after a timestamped backup. Failures surface as
:class:`FileOperationError`.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from datetime import datetime
from typing import Iterable, List, Optional, Union

from uvup.utils.logger import get_logger
from uvup.exceptions import FileOperationError
from uvup.constants import DEFAULT_EXCLUDE_DIRS, MANIFEST_FILE_NAME, MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def _existing_file(path: Path, operation: str = "read") -> Path:
    """Resolve ``path``, which must be a regular file."""
    if not path.is_file():
        problem = "Not a file" if path.exists() else "File not found"
        raise FileOperationError(
            f"{problem}: {path}",
            file_path=str(path),
            operation=operation,
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing anything larger than ``max_size`` bytes.

    Line endings are returned untouched so a rewrite can reproduce them.
    """
    path = _existing_file(Path(file_path))

    try:
        size = path.stat().st_size
        if max_size is not None and size > max_size:
            raise FileOperationError(
                f"File too large: {size} bytes (max {max_size})",
                file_path=str(path),
                operation="read",
            )
        with open(path, "r", encoding=encoding, newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def _atomic_write(target: Path, content: str) -> None:
    """Replace ``target`` with ``content`` through a sibling temporary file.

    The temporary file takes over the target's permission bits and is
    removed again when anything fails before ``os.replace``.
    """
    temp: Optional[Path] = None

    try:
        fd, name = tempfile.mkstemp(
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
        )
        temp = Path(name)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())

        if target.exists():
            shutil.copymode(target, temp)
        os.replace(temp, target)
    except OSError as exc:
        if temp is not None:
            _remove_leftover(temp)
        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def _remove_leftover(path: Path) -> None:
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    create_backup: bool = False,
) -> Optional[Path]:
    """Atomically write ``content`` to ``file_path``.

    Args:
        file_path: Destination path.
        content: Full replacement text.
        create_backup: Copy the current file aside first.

    Returns:
        Path of the backup, or ``None`` when none was made.
    """
    path = Path(file_path)
    backup = create_timestamped_backup(path) if create_backup and path.exists() else None

    _atomic_write(path, content)
    return backup


def create_timestamped_backup(file_path: PathLike) -> Path:
    """Copy a file to ``{stem}.{timestamp}.backup{suffix}`` beside it."""
    path = _existing_file(Path(file_path), operation="backup")
    stamp = datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
    backup = path.with_name(f"{path.stem}.{stamp}.backup{path.suffix}")

    try:
        shutil.copy2(path, backup)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create backup: {exc}",
            file_path=str(path),
            operation="backup",
            original_error=exc,
        ) from exc

    logger.debug("Backed up %s to %s", path.name, backup)
    return backup


def find_manifest_files(
    directory: PathLike = ".",
    *,
    exclude: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> List[Path]:
    """Find ``pyproject.toml`` files below ``directory``.

    Directories whose name is in ``exclude`` are not descended into.
    Symlinked directories are not followed.

    Returns:
        Manifest paths sorted so parents come before nested projects.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        return []

    skipped = set(exclude)
    matches: List[Path] = []

    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skipped)
        if MANIFEST_FILE_NAME in filenames:
            matches.append(Path(current) / MANIFEST_FILE_NAME)

    return sorted(matches, key=lambda p: (len(p.relative_to(root).parts), str(p)))
