"""Target platform helpers shared by extraction and invocation.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""


def is_windows(platform: str) -> bool:
    """True for Windows platform strings (sys.platform or os.name style)."""
    return platform.startswith("win") or platform in ("nt", "cygwin")
