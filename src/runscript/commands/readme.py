# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
README command for runscript.

Regenerates the "Available Scripts" table of a README from script headers.
"""

from pathlib import Path

import typer

from runscript.scripts import (
    generate_readme_section,
    get_script_descriptions,
    update_readme_if_needed,
)

app = typer.Typer(help="Maintain the scripts table in a README")


@app.command()
def update(
    scripts_dir: Path = typer.Option(
        Path("bash_scripts"), "--scripts-dir", "-s", help="Directory containing .sh scripts"
    ),
    readme: Path = typer.Option(
        Path("README.md"), "--readme", "-r", help="README file to update"
    ),
):
    """
    Update the scripts section of a README.

    Replaces the text between <!-- SCRIPTS_SECTION_START --> and
    <!-- SCRIPTS_SECTION_END -->, appending the section if the markers are
    missing. The file is only written when its content changes.
    """
    if not scripts_dir.is_dir():
        typer.echo(f"Error: scripts directory not found: {scripts_dir}", err=True)
        raise typer.Exit(1)

    descriptions = get_script_descriptions(scripts_dir)
    section = generate_readme_section(descriptions)

    try:
        updated = update_readme_if_needed(section, readme)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if updated:
        typer.echo(f"Updated {readme} ({len(descriptions)} script(s))")
    else:
        typer.echo(f"{readme} is already up to date")
