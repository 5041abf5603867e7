"""Script runner: stage bundled bash scripts and execute one of them.

Each execution resets a staging directory, extracts the scripts into it,
marks them executable, runs the requested script with the staging directory
as working directory and tears the directory down again.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import dataclasses
import logging
import os
import subprocess
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from runscript.event_client import EventClient
from runscript.scripts.assets import AssetSource, bundled_source
from runscript.scripts.errors import (
    InvocationError,
    ScriptFailedError,
    ScriptNotFoundError,
    ScriptRunError,
    ScriptValidationError,
)
from runscript.scripts.extract import (
    SCRIPT_SUFFIX,
    copy_dir_contents_flat,
    extract_scripts_flat,
    make_scripts_executable,
)
from runscript.scripts.invocation import InvocationBuilder, select_invocation_builder
from runscript.scripts.staging import StagingArea

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = "bash_scripts"
DEFAULT_TOOL_NAME = "runscript"

STAGING_FRESH = "fresh"
STAGING_USER = "user"
STAGING_MODES = (STAGING_FRESH, STAGING_USER)

# Forced on every child so script output does not depend on the caller's locale
LOCALE_OVERRIDE = {"LANG": "C"}


@dataclass(frozen=True)
class RunnerConfig:
    """Immutable configuration of a ScriptRunner.

    Attributes:
        source: Where bundled scripts are read from.
        base_dir: Directory inside the source (and inside project_root) holding scripts.
        interpreter: Interpreter command, None for the platform default.
        clean_scripts: Tear the staging directory down after each run.
        project_root: Copy scripts from <project_root>/<base_dir> instead of the source.
        tool_name: Name of the per-user staging directory (~/.<tool_name>).
        staging: "fresh" for a unique directory per run, "user" for ~/.<tool_name>.
        platform: Target platform, decides interpreter and invocation style.
    """

    source: AssetSource = field(default_factory=bundled_source)
    base_dir: str = DEFAULT_BASE_DIR
    interpreter: Optional[str] = None
    clean_scripts: bool = True
    project_root: Optional[Path] = None
    tool_name: str = DEFAULT_TOOL_NAME
    staging: str = STAGING_FRESH
    platform: str = sys.platform

    def __post_init__(self):
        if self.staging not in STAGING_MODES:
            raise ValueError(
                f"staging must be one of {', '.join(STAGING_MODES)}, got: {self.staging}"
            )
        if self.project_root is not None and not isinstance(self.project_root, Path):
            object.__setattr__(self, "project_root", Path(self.project_root).expanduser())

    def with_keep_scripts(self, keep: bool) -> "RunnerConfig":
        """Copy of this config that keeps (or cleans) staged scripts after a run."""
        return dataclasses.replace(self, clean_scripts=not keep)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one script execution.

    error is set iff exit_code != 0 or a setup step failed.
    """

    exit_code: int
    output: str
    error: Optional[ScriptRunError] = None
    staging_dir: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0

    def raise_for_error(self) -> None:
        """Raise the recorded error, if any."""
        if self.error is not None:
            raise self.error


def normalize_script_name(name: str) -> str:
    """Validate a script name and append .sh when it has no extension.

    Raises:
        ScriptValidationError: If the name is empty or points outside staging.
    """
    if not name or not name.strip():
        raise ScriptValidationError("script name cannot be empty")
    if ".." in name:
        raise ScriptValidationError(f"path traversal not allowed in script name: {name}")
    if "/" in name or "\\" in name:
        raise ScriptValidationError(f"path separators not allowed in script name: {name}")

    if "." not in name:
        name = name + SCRIPT_SUFFIX
    return name


def build_environment(correlation_id: str) -> dict:
    """Inherited environment plus the locale override and a correlation id."""
    env = os.environ.copy()
    env.update(LOCALE_OVERRIDE)
    env["RUNSCRIPT_CORRELATION_ID"] = correlation_id
    return env


class ScriptRunner:
    """Runs scripts from an asset source through a staging directory."""

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        event_client: Optional[EventClient] = None,
    ):
        """
        Initialize script runner.

        Args:
            config: Runner configuration (defaults to the bundled bash scripts)
            event_client: Optional JSONL event log for execution events
        """
        self.config = config or RunnerConfig()
        self.event_client = event_client
        self.invocation: InvocationBuilder = select_invocation_builder(
            self.config.platform, self.config.interpreter
        )

    @classmethod
    def bash(
        cls,
        project_root: Optional[Union[str, Path]] = None,
        event_client: Optional[EventClient] = None,
    ) -> "ScriptRunner":
        """Runner for the bundled bash scripts, optionally read from a project checkout."""
        config = RunnerConfig(project_root=Path(project_root) if project_root else None)
        return cls(config, event_client=event_client)

    def new_staging_area(self) -> StagingArea:
        """Staging area for one execution, according to the configured mode."""
        if self.config.staging == STAGING_USER:
            return StagingArea.for_user(self.config.tool_name)
        return StagingArea.fresh(prefix=f"{self.config.tool_name}-")

    def stage(self, staging: StagingArea) -> List[str]:
        """Reset the staging area and populate it with executable scripts."""
        staging.reset()

        if self.config.project_root is not None:
            src_dir = self.config.project_root / self.config.base_dir
            staged = copy_dir_contents_flat(src_dir, staging.path)
        else:
            staged = extract_scripts_flat(self.config.source, self.config.base_dir, staging.path)

        make_scripts_executable(staging.path, self.config.platform)
        return staged

    def execute(
        self,
        name: str,
        args: Optional[Sequence[str]] = None,
        staging: Optional[StagingArea] = None,
    ) -> ExecutionResult:
        """Run a script and report its exit code, combined output and error.

        Never raises ScriptRunError: every failure is reported on the result.

        Args:
            name: Script name; .sh is appended when there is no extension.
            args: Arguments passed positionally after the script path.
            staging: Staging area to use instead of a new one.

        Returns:
            ExecutionResult of the run.
        """
        args = list(args or [])
        correlation_id = str(uuid.uuid4())

        try:
            script_name = normalize_script_name(name)
            if staging is None:
                staging = self.new_staging_area()
        except ScriptRunError as e:
            logger.error(f"Cannot run script '{name}': {e}")
            return ExecutionResult(exit_code=1, output="", error=e)

        start_time = datetime.now(timezone.utc)
        try:
            self._log_event(
                "script.started",
                correlation_id,
                "running",
                payload={
                    "script": script_name,
                    "staging_dir": str(staging.path),
                    "arg_count": len(args),
                },
            )
            result = self._execute_staged(script_name, args, staging, correlation_id)
        finally:
            if self.config.clean_scripts:
                staging.teardown()

        duration_ms = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
        if result.error is None:
            self._log_event(
                "script.completed",
                correlation_id,
                "succeeded",
                payload={"script": script_name, "duration_ms": duration_ms, "exit_code": 0},
            )
        else:
            self._log_event(
                "script.failed",
                correlation_id,
                "failed",
                payload={
                    "script": script_name,
                    "duration_ms": duration_ms,
                    "exit_code": result.exit_code,
                    "output_tail": _tail(result.output),
                },
                error_message=str(result.error),
            )
        return result

    def _execute_staged(
        self,
        script_name: str,
        args: List[str],
        staging: StagingArea,
        correlation_id: str,
    ) -> ExecutionResult:
        try:
            self.stage(staging)

            script_path = staging.path / script_name
            if not script_path.is_file():
                raise ScriptNotFoundError(script_name, staging.staged_names())

            cmd = self.invocation.build(script_path, args)
        except ScriptRunError as e:
            logger.error(f"Failed to prepare script '{script_name}': {e}")
            return ExecutionResult(exit_code=1, output="", error=e, staging_dir=staging.path)

        logger.info(f"Executing: {script_name} ({len(args)} argument(s)) in {staging.path}")
        logger.debug(f"Command: {cmd}")

        try:
            completed = subprocess.run(
                cmd,
                cwd=staging.path,
                env=build_environment(correlation_id),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            error = InvocationError(
                f"error executing script '{script_name}' with {self.invocation.interpreter}: {e}"
            )
            error.__cause__ = e
            logger.error(str(error))
            return ExecutionResult(exit_code=1, output="", error=error, staging_dir=staging.path)

        output = completed.stdout or ""
        if completed.returncode != 0:
            # Negative codes mean the child was killed by a signal
            exit_code = completed.returncode if completed.returncode > 0 else 1
            error = ScriptFailedError(script_name, exit_code, output)
            logger.error(f"Script '{script_name}' failed with exit code {exit_code}")
            return ExecutionResult(
                exit_code=exit_code, output=output, error=error, staging_dir=staging.path
            )

        return ExecutionResult(exit_code=0, output=output, staging_dir=staging.path)

    def _log_event(self, event_type: str, correlation_id: str, status: str, **kwargs) -> None:
        if self.event_client is None:
            return
        try:
            self.event_client.log_event(
                event_type=event_type,
                correlation_id=correlation_id,
                status=status,
                **kwargs,
            )
        except OSError as e:
            logger.warning(f"Failed to record {event_type} event: {e}")


def _tail(output: str, lines: int = 10) -> str:
    """Last lines of output, for event payloads."""
    if not output:
        return ""
    return "\n".join(output.strip().split("\n")[-lines:])


def run_script(
    name: str,
    args: Optional[Sequence[str]] = None,
    project_root: Optional[Union[str, Path]] = None,
) -> ExecutionResult:
    """Run a bundled bash script with a default runner."""
    return ScriptRunner.bash(project_root=project_root).execute(name, args)
