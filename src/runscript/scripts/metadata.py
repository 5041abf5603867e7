"""Script listing and description extraction.

Descriptions come from a header comment in the first lines of a script:

    #!/bin/bash
    # desc: Create a new repository

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from runscript.scripts.extract import SCRIPT_SUFFIX

# "# desc: ..." or "# description: ...", case-insensitive
DESC_PATTERN = re.compile(r"^#\s*desc(ription)?:\s*(.+)$", re.IGNORECASE)

# Only the head of a script is searched for a description
DESC_SEARCH_LINES = 10

EMPTY_DESCRIPTION = "Empty script file"
DEFAULT_DESCRIPTION = "Shell script utility"


@dataclass
class ScriptInfo:
    """A script file and its description."""

    name: str
    description: str


def describe_script(content: str) -> str:
    """Description of a script from its text."""
    if not content:
        return EMPTY_DESCRIPTION

    for line in content.split("\n")[:DESC_SEARCH_LINES]:
        match = DESC_PATTERN.match(line.rstrip("\r"))
        if match:
            return match.group(2).strip()

    return DEFAULT_DESCRIPTION


def get_script_names(directory: Union[str, Path, Any]) -> List[str]:
    """Sorted names of the .sh files directly inside directory.

    Accepts a path or an importlib.resources Traversable.

    Raises:
        FileNotFoundError: If directory does not exist.
    """
    if isinstance(directory, str):
        directory = Path(directory)
    return sorted(
        child.name
        for child in directory.iterdir()
        if child.is_file() and child.name.endswith(SCRIPT_SUFFIX)
    )


def get_script_descriptions(directory: Union[str, Path, Any]) -> Dict[str, str]:
    """Map each script name in directory to its description."""
    if isinstance(directory, str):
        directory = Path(directory)

    descriptions = {}
    for name in get_script_names(directory):
        content = (directory / name).read_bytes().decode("utf-8", errors="replace")
        descriptions[name] = describe_script(content)
    return descriptions


def list_script_info(directory: Union[str, Path, Any]) -> List[ScriptInfo]:
    """Scripts in directory with their descriptions, sorted by name."""
    descriptions = get_script_descriptions(directory)
    return [ScriptInfo(name=name, description=desc) for name, desc in descriptions.items()]
