"""
tsh Exception Hierarchy

Architecture:
    ShellException
    ├── ConfigError
    └── StageError
        ├── EmptyCommandError
        └── ArgumentLimitError
    ProcessException
    ├── ResourceFailure
    │   ├── ForkError
    │   └── PipeCreationError
    ├── ExecFailure
    └── PipelineError
"""

from .shell_exceptions import (
    ShellException,
    ConfigError,
    StageError,
    EmptyCommandError,
    ArgumentLimitError,
)

from .process_exceptions import (
    ProcessException,
    ResourceFailure,
    ForkError,
    PipeCreationError,
    ExecFailure,
    PipelineError,
)

__all__ = [
    # Shell exceptions
    "ShellException",
    "ConfigError",
    "StageError",
    "EmptyCommandError",
    "ArgumentLimitError",
    # Process exceptions
    "ProcessException",
    "ResourceFailure",
    "ForkError",
    "PipeCreationError",
    "ExecFailure",
    "PipelineError",
]
