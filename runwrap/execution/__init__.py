"""Executable runner exports."""

from .base import ExecutionResult, Options, TextWriter, parse_env_entries
from .executable import Executable
from .fanout import FanOutWriter

__all__ = [
    "Executable",
    "ExecutionResult",
    "FanOutWriter",
    "Options",
    "TextWriter",
    "parse_env_entries",
]
