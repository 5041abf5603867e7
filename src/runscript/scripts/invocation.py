"""Build interpreter command lines for a staged script.

The builder is picked once per runner from the target platform:
- DirectInvocation runs `<interpreter> <script> <args...>`.
- CompatShellInvocation runs Git Bash on Windows as
  `bash.exe -c "'<script>' \"$@\"" -- <args...>` with a forward-slash path.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from pathlib import Path
from typing import List, Optional, Sequence

from runscript.scripts.platforms import is_windows

DEFAULT_INTERPRETER = "bash"
GIT_BASH_INTERPRETER = r"C:\Program Files\Git\bin\bash.exe"


def default_interpreter(platform: str) -> str:
    """Interpreter used when none is configured."""
    if is_windows(platform):
        return GIT_BASH_INTERPRETER
    return DEFAULT_INTERPRETER


class InvocationBuilder:
    """Turns a script path and arguments into an argv list."""

    def __init__(self, interpreter: str):
        self.interpreter = interpreter

    def build(self, script_path: Path, args: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.interpreter!r})"


class DirectInvocation(InvocationBuilder):
    """Pass the script path and arguments straight to the interpreter."""

    def build(self, script_path: Path, args: Sequence[str]) -> List[str]:
        return [self.interpreter, str(script_path), *args]


class CompatShellInvocation(InvocationBuilder):
    """Run through a compatibility bash with a `-c` command string.

    Only the script path is embedded in the command string. Arguments follow
    `--` as real process arguments and reach the script through "$@", so they
    are never re-parsed by the shell.
    """

    @staticmethod
    def to_posix_path(script_path: Path) -> str:
        return str(script_path).replace("\\", "/")

    @staticmethod
    def quote(value: str) -> str:
        """Single-quote value for bash, escaping embedded single quotes."""
        return "'" + value.replace("'", "'\"'\"'") + "'"

    def command_string(self, script_path: Path) -> str:
        return f'{self.quote(self.to_posix_path(script_path))} "$@"'

    def build(self, script_path: Path, args: Sequence[str]) -> List[str]:
        return [self.interpreter, "-c", self.command_string(script_path), "--", *args]


def select_invocation_builder(
    platform: str, interpreter: Optional[str] = None
) -> InvocationBuilder:
    """Pick the invocation style for a platform.

    Args:
        platform: sys.platform style string of the target.
        interpreter: Interpreter override; defaults per platform.
    """
    interpreter = interpreter or default_interpreter(platform)
    if is_windows(platform):
        return CompatShellInvocation(interpreter)
    return DirectInvocation(interpreter)
