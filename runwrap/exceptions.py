"""Custom exceptions for executable runs."""

from __future__ import annotations

import signal

from typing import Optional


class ExecutionError(RuntimeError):
    """Base exception for failed invocations."""


class LaunchError(ExecutionError):
    """Raised when the process could not be started at all."""


class ExitStatusError(ExecutionError):
    """Raised when the process ran but did not exit cleanly."""

    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(describe_returncode(returncode))


class InvalidOptionsError(ExecutionError, ValueError):
    """Raised when invocation options cannot be turned into a process spec."""


class ConfigError(ValueError):
    """Raised when a runwrap config file is missing or malformed."""


def _signal_name(signum: int) -> Optional[str]:
    try:
        description = signal.strsignal(signum)
    except ValueError:
        return None
    return description.lower() if description else None


def describe_returncode(returncode: int) -> str:
    """Render a return code the way a shell user expects to read it."""

    if returncode < 0:
        signum = -returncode
        return f"signal: {_signal_name(signum) or signum}"
    return f"exit status {returncode}"
