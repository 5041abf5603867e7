"""Keep the "Available Scripts" table of a README in sync.

The table lives between two marker lines:

    <!-- SCRIPTS_SECTION_START -->
    ...
    <!-- SCRIPTS_SECTION_END -->

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import re
from pathlib import Path
from typing import Mapping, Union

import jinja2

logger = logging.getLogger(__name__)

SECTION_START = "<!-- SCRIPTS_SECTION_START -->"
SECTION_END = "<!-- SCRIPTS_SECTION_END -->"

SECTION_PATTERN = re.compile(
    re.escape(SECTION_START) + r"\s*[\S\s]*?\s*" + re.escape(SECTION_END),
    re.DOTALL,
)

SECTION_TEMPLATE = """\
## Available Scripts

| Script Name | Description |
|-------------|-------------|
{% for name, description in scripts %}| `{{ name }}` | {{ description }} |
{% endfor %}
"""


def generate_readme_section(descriptions: Mapping[str, str]) -> str:
    """Render the scripts table, one row per script sorted by name."""
    env = jinja2.Environment(autoescape=False)
    template = env.from_string(SECTION_TEMPLATE)
    return template.render(scripts=sorted(descriptions.items()))


def merge_section(existing: str, scripts_section: str) -> str:
    """Content of a README after placing scripts_section between the markers."""
    new_section = f"{SECTION_START}\n{scripts_section}\n{SECTION_END}"

    if existing == "":
        return new_section + "\n"
    if SECTION_PATTERN.search(existing):
        return SECTION_PATTERN.sub(lambda _match: new_section, existing)
    return existing.strip() + "\n\n" + new_section


def update_readme_if_needed(scripts_section: str, readme_path: Union[str, Path]) -> bool:
    """Write scripts_section into the README if it changes the file.

    The file is created when missing.

    Returns:
        True if the file was written, False if it was already up to date.

    Raises:
        ValueError: If the existing README is not valid UTF-8.
    """
    readme_path = Path(readme_path)
    try:
        existing_bytes = readme_path.read_bytes()
    except FileNotFoundError:
        existing_bytes = b""

    try:
        existing = existing_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"{readme_path} is not valid UTF-8: {e}") from e

    new_content = merge_section(existing, scripts_section)
    new_bytes = new_content.encode("utf-8")

    if new_bytes == existing_bytes:
        logger.debug(f"README already up to date: {readme_path}")
        return False

    readme_path.write_bytes(new_bytes)
    logger.info(f"Updated scripts section in {readme_path}")
    return True
