"""Materialize scripts into a staging directory.

Extraction is flat: only top-level files are copied and subdirectory
structure is discarded.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import os
from pathlib import Path
from typing import List

from runscript.scripts.assets import AssetSource
from runscript.scripts.errors import (
    AssetError,
    PermissionSetupError,
    ScriptSourceNotFoundError,
)
from runscript.scripts.platforms import is_windows

logger = logging.getLogger(__name__)

SCRIPT_SUFFIX = ".sh"
FILE_MODE = 0o644
EXEC_MODE = 0o755


def _write_file(dest_path: Path, content: bytes) -> None:
    try:
        dest_path.write_bytes(content)
        os.chmod(dest_path, FILE_MODE)
    except OSError as e:
        raise AssetError(f"error writing file {dest_path}: {e}") from e


def extract_scripts_flat(source: AssetSource, base_dir: str, dest_dir: Path) -> List[str]:
    """Extract the top-level .sh files of base_dir into dest_dir.

    Args:
        source: Asset source to read from.
        base_dir: Directory inside the source holding the scripts.
        dest_dir: Existing staging directory.

    Returns:
        Names of the extracted files.

    Raises:
        AssetError: If an entry cannot be read or written.
    """
    extracted = []
    for entry in source.list_entries(base_dir):
        if entry.is_dir or not entry.name.endswith(SCRIPT_SUFFIX):
            continue

        content = source.read_bytes(base_dir, entry.name)
        _write_file(dest_dir / entry.name, content)
        extracted.append(entry.name)

    logger.debug(f"Extracted {len(extracted)} script(s) from {source.label} to {dest_dir}")
    return extracted


def copy_dir_contents_flat(src_dir: Path, dest_dir: Path) -> List[str]:
    """Copy every top-level file of src_dir into dest_dir.

    Used when scripts come from a project checkout rather than the bundle.
    Helper files that live next to the scripts are copied too.

    Raises:
        ScriptSourceNotFoundError: If src_dir does not exist.
        AssetError: If a file cannot be read or written.
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise ScriptSourceNotFoundError(f"scripts directory not found at {src_dir}")

    try:
        children = sorted(src_dir.iterdir())
    except OSError as e:
        raise AssetError(f"error reading directory {src_dir}: {e}") from e

    logger.debug(f"Files in {src_dir}: {[child.name for child in children]}")

    dest_dir.mkdir(mode=EXEC_MODE, parents=True, exist_ok=True)
    copied = []
    for child in children:
        if child.is_dir():
            continue

        try:
            content = child.read_bytes()
        except OSError as e:
            raise AssetError(f"error reading file {child}: {e}") from e

        _write_file(dest_dir / child.name, content)
        copied.append(child.name)

    return copied


def make_scripts_executable(directory: Path, platform: str) -> List[Path]:
    """Set the executable bit on every .sh file under directory.

    Git Bash on Windows does not need the bit, so this is a no-op there.

    Returns:
        Paths that were changed.

    Raises:
        PermissionSetupError: If the walk or a chmod fails.
    """
    if is_windows(platform):
        return []

    def _raise(error: OSError) -> None:
        raise error

    changed = []
    try:
        for root, _dirs, files in os.walk(directory, onerror=_raise):
            for name in files:
                if not name.endswith(SCRIPT_SUFFIX):
                    continue
                path = Path(root) / name
                try:
                    os.chmod(path, EXEC_MODE)
                except OSError as e:
                    raise PermissionSetupError(
                        f"error making script {path} executable: {e}"
                    ) from e
                changed.append(path)
    except PermissionSetupError:
        raise
    except OSError as e:
        raise PermissionSetupError(f"error walking scripts directory {directory}: {e}") from e

    return changed
