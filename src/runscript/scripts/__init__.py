"""Bundled bash script staging and execution.

Scripts ship as package data, are extracted to a staging directory at
runtime and executed with the staging directory as working directory.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from runscript.scripts.assets import AssetEntry, AssetSource, bundled_source
from runscript.scripts.errors import (
    AssetError,
    InvocationError,
    PermissionSetupError,
    ScriptFailedError,
    ScriptNotFoundError,
    ScriptRunError,
    ScriptSourceNotFoundError,
    ScriptValidationError,
    StagingError,
)
from runscript.scripts.extract import (
    copy_dir_contents_flat,
    extract_scripts_flat,
    make_scripts_executable,
)
from runscript.scripts.invocation import (
    CompatShellInvocation,
    DirectInvocation,
    InvocationBuilder,
    select_invocation_builder,
)
from runscript.scripts.metadata import (
    ScriptInfo,
    describe_script,
    get_script_descriptions,
    get_script_names,
    list_script_info,
)
from runscript.scripts.readme import generate_readme_section, update_readme_if_needed
from runscript.scripts.runner import (
    ExecutionResult,
    RunnerConfig,
    ScriptRunner,
    normalize_script_name,
    run_script,
)
from runscript.scripts.staging import StagingArea

__all__ = [
    "AssetEntry",
    "AssetSource",
    "bundled_source",
    "ScriptRunError",
    "StagingError",
    "ScriptSourceNotFoundError",
    "AssetError",
    "PermissionSetupError",
    "ScriptValidationError",
    "ScriptNotFoundError",
    "InvocationError",
    "ScriptFailedError",
    "extract_scripts_flat",
    "copy_dir_contents_flat",
    "make_scripts_executable",
    "InvocationBuilder",
    "DirectInvocation",
    "CompatShellInvocation",
    "select_invocation_builder",
    "ScriptInfo",
    "describe_script",
    "get_script_names",
    "get_script_descriptions",
    "list_script_info",
    "generate_readme_section",
    "update_readme_if_needed",
    "ExecutionResult",
    "RunnerConfig",
    "ScriptRunner",
    "normalize_script_name",
    "run_script",
    "StagingArea",
]
