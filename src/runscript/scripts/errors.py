"""Exceptions raised while staging and running bundled scripts.

Every failure in the pipeline is a ScriptRunError. ScriptRunner.execute
catches them and reports them on the ExecutionResult instead of raising.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from typing import Optional


class ScriptRunError(Exception):
    """Base class for script staging and execution failures."""

    pass


class StagingError(ScriptRunError):
    """Raised when the staging directory cannot be resolved, cleared or created."""

    pass


class ScriptSourceNotFoundError(StagingError):
    """Raised when an override project root has no script directory."""

    pass


class AssetError(ScriptRunError):
    """Raised when a bundled script cannot be read or written to staging."""

    pass


class PermissionSetupError(ScriptRunError):
    """Raised when staged scripts cannot be made executable."""

    pass


class ScriptValidationError(ScriptRunError):
    """Raised when a script name is not acceptable."""

    pass


class ScriptNotFoundError(ScriptRunError):
    """Raised when the requested script is not present after staging."""

    def __init__(self, name: str, available: list):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"script '{name}' does not exist. Available files: {self.available}"
        )


class InvocationError(ScriptRunError):
    """Raised when the interpreter process cannot be started."""

    pass


class ScriptFailedError(ScriptRunError):
    """Raised when the script ran but exited with a non-zero code."""

    def __init__(self, name: str, exit_code: int, output: Optional[str] = None):
        self.name = name
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"script '{name}' exited with code {exit_code}")
