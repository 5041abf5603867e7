"""Read-only sources of bundled script files.

An AssetSource wraps a traversable root: the files shipped inside an
installed package (via importlib.resources) or a plain directory on disk.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import importlib.resources
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Union

from runscript.scripts.errors import AssetError


@dataclass(frozen=True)
class AssetEntry:
    """A top-level entry inside an asset directory."""

    name: str
    is_dir: bool


class AssetSource:
    """A read-only bundle of named files, organized under base directories."""

    def __init__(self, root: Any, label: str):
        """
        Args:
            root: Traversable (importlib.resources) or Path the source reads from.
            label: Human readable name used in error messages.
        """
        self.root = root
        self.label = label

    @classmethod
    def from_package(cls, package: str) -> "AssetSource":
        """Source backed by the data files of an installed package."""
        return cls(importlib.resources.files(package), label=f"package:{package}")

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "AssetSource":
        """Source backed by a directory on disk."""
        path = Path(path).expanduser()
        return cls(path, label=str(path))

    def _dir(self, base_dir: str) -> Any:
        return self.root / base_dir if base_dir else self.root

    def list_entries(self, base_dir: str) -> List[AssetEntry]:
        """List the top-level entries of base_dir, sorted by name.

        Raises:
            AssetError: If base_dir does not exist or cannot be listed.
        """
        directory = self._dir(base_dir)
        try:
            children = list(directory.iterdir())
        except (OSError, ValueError) as e:
            raise AssetError(
                f"error reading asset directory '{base_dir}' in {self.label}: {e}"
            ) from e

        entries = [AssetEntry(name=child.name, is_dir=child.is_dir()) for child in children]
        return sorted(entries, key=lambda entry: entry.name)

    def read_bytes(self, base_dir: str, name: str) -> bytes:
        """Read a whole file from base_dir.

        Raises:
            AssetError: If the file cannot be read.
        """
        try:
            return (self._dir(base_dir) / name).read_bytes()
        except (OSError, ValueError) as e:
            raise AssetError(f"error reading asset file '{name}' in {self.label}: {e}") from e

    def __repr__(self) -> str:
        return f"AssetSource({self.label!r})"


def bundled_source() -> AssetSource:
    """The scripts shipped with runscript itself."""
    return AssetSource.from_package("runscript")
