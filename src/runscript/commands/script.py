"""
Script command for runscript.

Runs bundled bash scripts through a staging directory.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import dataclasses
from pathlib import Path
from typing import List, Optional

import typer

from runscript.config import ConfigError, load_config, runner_config_from_mapping
from runscript.event_client import EventClient
from runscript.scripts import (
    RunnerConfig,
    ScriptRunner,
    list_script_info,
)
from runscript.scripts.runner import STAGING_USER

app = typer.Typer(help="Run bundled bash scripts")


def _runner_config(config_path: Optional[str], project_root: Optional[Path]) -> RunnerConfig:
    try:
        config = runner_config_from_mapping(load_config(config_path))
    except (ConfigError, FileNotFoundError) as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(1)

    if project_root is not None:
        config = dataclasses.replace(config, project_root=project_root.expanduser())
    return config


@app.command("run")
def run_command(
    name: str = typer.Argument(..., help="Script name (.sh is added when omitted)"),
    args: Optional[List[str]] = typer.Argument(
        None, help="Arguments to pass to the script"
    ),
    project_root: Optional[Path] = typer.Option(
        None,
        "--project-root",
        "-p",
        help="Use <root>/bash_scripts instead of the bundled scripts",
    ),
    keep: bool = typer.Option(
        False, "--keep", help="Keep extracted scripts after the run"
    ),
    shared_staging: bool = typer.Option(
        False,
        "--shared-staging",
        help="Stage into ~/.runscript instead of a fresh temporary directory",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
    no_events: bool = typer.Option(
        False, "--no-events", help="Do not append to the execution event log"
    ),
):
    """Run a script and exit with its exit code.

    Examples:
        runscript script run test-script
        runscript script run test-script -- --flag value
        runscript script run test-script --project-root ~/src/my-tool
    """
    config = _runner_config(config_path, project_root)
    if keep:
        config = config.with_keep_scripts(True)
    if shared_staging:
        config = dataclasses.replace(config, staging=STAGING_USER)

    event_client = None if no_events else EventClient.default()
    runner = ScriptRunner(config, event_client=event_client)
    result = runner.execute(name, args or [])

    if result.output:
        typer.echo(result.output, nl=not result.output.endswith("\n"))
    if result.error is not None:
        typer.echo(f"Error: {result.error}", err=True)
    if keep and result.staging_dir is not None:
        typer.echo(f"Scripts kept in {result.staging_dir}", err=True)

    raise typer.Exit(result.exit_code)


@app.command("list")
def list_command(
    project_root: Optional[Path] = typer.Option(
        None,
        "--project-root",
        "-p",
        help="List <root>/bash_scripts instead of the bundled scripts",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """List available scripts with their descriptions.

    Examples:
        runscript script list
    """
    config = _runner_config(config_path, project_root)

    if config.project_root is not None:
        directory = config.project_root / config.base_dir
        if not directory.is_dir():
            typer.echo(f"Error: scripts directory not found at {directory}", err=True)
            raise typer.Exit(1)
    else:
        directory = config.source.root / config.base_dir

    scripts = list_script_info(directory)
    if not scripts:
        typer.echo("No scripts found.")
        return

    typer.echo("Available scripts:\n")
    for script in scripts:
        typer.echo(f"  {script.name}")
        typer.echo(f"    {script.description}")
