# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Main CLI entry point for runscript.

Dumb trigger: parses args, builds a runner, renders the result.
"""

import logging

import typer

from runscript import __version__


app = typer.Typer(
    name="runscript",
    help="Run bash scripts bundled with runscript",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Run bash scripts bundled with runscript."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show version information."""
    typer.echo(f"runscript version {__version__}")


# Static commands (script, readme, config)
from runscript.commands import config, readme, script

app.add_typer(script.app, name="script")
app.add_typer(readme.app, name="readme")
app.add_typer(config.app, name="config")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
