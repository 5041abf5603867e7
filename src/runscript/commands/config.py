# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Config command for runscript.

Provides basic configuration validation.
"""

import typer

from runscript.config import ConfigError, load_config, runner_config_from_mapping

app = typer.Typer(help="Manage and validate configuration")


@app.command()
def validate(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """
    Validate configuration file.

    Checks that the config file exists, is valid YAML and only uses known keys.
    """
    typer.echo("Validating configuration...")
    typer.echo()

    try:
        config = runner_config_from_mapping(load_config(config_path))
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except (ConfigError, ValueError) as e:
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Configuration structure is valid")
    typer.echo()
    typer.echo(f"Interpreter: {config.interpreter or 'platform default'}")
    typer.echo(f"Staging: {config.staging}")
    if config.project_root:
        typer.echo(f"Project root: {config.project_root}")
    typer.echo()
    typer.echo("Configuration validation complete!")
