"""Staging directories that scripts are extracted to and run from.

Two flavours exist:
- for_user(): one fixed directory per user (~/.runscript). Predictable across
  runs, but shared: concurrent executions must be serialized by the caller.
- fresh(): a unique temporary directory per execution. Safe to run in parallel.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from runscript.scripts.errors import StagingError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755


@dataclass(frozen=True)
class StagingArea:
    """A writable directory scripts are materialized into.

    Attributes:
        path: The staging directory.
        persistent: Keep the directory itself on teardown (only empty it).
    """

    path: Path
    persistent: bool = True

    @classmethod
    def for_user(cls, tool_name: str, home: Optional[Path] = None) -> "StagingArea":
        """Resolve ~/.<tool_name>, creating it if absent.

        Raises:
            StagingError: If the home directory cannot be determined or the
                directory cannot be created.
        """
        if home is None:
            try:
                home = Path.home()
            except (RuntimeError, KeyError) as e:
                raise StagingError(f"error getting user home directory: {e}") from e

        path = Path(home) / f".{tool_name}"
        try:
            path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise StagingError(f"error creating scripts directory {path}: {e}") from e
        return cls(path=path, persistent=True)

    @classmethod
    def fresh(cls, prefix: str = "runscript-") -> "StagingArea":
        """Create a unique temporary staging directory.

        Raises:
            StagingError: If the directory cannot be created.
        """
        try:
            path = Path(tempfile.mkdtemp(prefix=prefix))
        except OSError as e:
            raise StagingError(f"error creating temporary scripts directory: {e}") from e
        return cls(path=path, persistent=False)

    def reset(self) -> None:
        """Leave the staging directory present and empty.

        Persistent areas are deleted and recreated. Fresh areas keep the
        private directory mkdtemp created and only lose its contents.

        Raises:
            StagingError: If removal or creation fails, or a fresh area's
                path is not a real directory.
        """
        if not self.persistent:
            self._empty()
            return

        try:
            if self.path.exists():
                shutil.rmtree(self.path)
        except OSError as e:
            raise StagingError(f"error cleaning scripts directory {self.path}: {e}") from e

        try:
            self.path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise StagingError(f"error recreating scripts directory {self.path}: {e}") from e

        logger.debug(f"Reset staging directory {self.path}")

    def _empty(self) -> None:
        if self.path.is_symlink() or not self.path.is_dir():
            raise StagingError(f"scripts directory {self.path} is not a directory")

        try:
            for child in self.path.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        except OSError as e:
            raise StagingError(f"error cleaning scripts directory {self.path}: {e}") from e

        logger.debug(f"Emptied staging directory {self.path}")

    def teardown(self) -> None:
        """Remove staged scripts. Best effort: failures are only logged.

        Persistent areas are recreated empty so they are ready for the next run.
        """
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to clean up scripts directory {self.path}: {e}")
            return

        if self.persistent:
            try:
                self.path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Failed to recreate scripts directory {self.path}: {e}")
                return

        logger.debug(f"Cleaned up staging directory {self.path}")

    def staged_names(self) -> list:
        """Sorted names of the files currently staged."""
        try:
            return sorted(child.name for child in self.path.iterdir())
        except OSError:
            return []
