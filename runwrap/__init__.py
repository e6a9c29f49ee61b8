"""runwrap package entry point."""

from .exceptions import (
    ConfigError,
    ExecutionError,
    ExitStatusError,
    InvalidOptionsError,
    LaunchError,
)
from .execution import Executable, ExecutionResult, FanOutWriter, Options

__all__ = [
    "ConfigError",
    "Executable",
    "ExecutionError",
    "ExecutionResult",
    "ExitStatusError",
    "FanOutWriter",
    "InvalidOptionsError",
    "LaunchError",
    "Options",
]
