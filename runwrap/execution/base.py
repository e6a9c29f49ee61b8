"""Invocation options and results for executable runs."""

from __future__ import annotations

import os

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Protocol, Sequence, Union

from runwrap.exceptions import ExecutionError, InvalidOptionsError

EnvSpec = Union[Sequence[str], Mapping[str, str]]


class TextWriter(Protocol):
    def write(self, text: str) -> object:
        ...


def parse_env_entries(env: Optional[EnvSpec]) -> Dict[str, str]:
    """Turn ``K=V`` entries (or a mapping) into an environment dict."""

    if not env:
        return {}
    if isinstance(env, Mapping):
        return {str(key): str(value) for key, value in env.items()}
    if isinstance(env, (str, bytes)):
        raise InvalidOptionsError(
            "env must be a list of KEY=VALUE entries, not a single string"
        )
    parsed: Dict[str, str] = {}
    for entry in env:
        key, sep, value = str(entry).partition("=")
        if not sep or not key:
            raise InvalidOptionsError(
                f"env entry must look like KEY=VALUE: {entry!r}"
            )
        parsed[key] = value
    return parsed


@dataclass(frozen=True)
class Options:
    """Per-call overrides; every field left empty inherits from the caller."""

    dir: Optional[Union[str, Path]] = None
    env: Optional[EnvSpec] = None
    stdout: Optional[TextWriter] = None
    stderr: Optional[TextWriter] = None

    def resolved_dir(self) -> Optional[str]:
        if not self.dir:
            return None
        return os.fspath(self.dir)

    def resolved_env(self) -> Optional[Dict[str, str]]:
        """Return the child's full environment, or None to inherit."""

        parsed = parse_env_entries(self.env)
        return parsed or None


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    error: Optional[ExecutionError] = None
    returncode: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def check(self) -> "ExecutionResult":
        if self.error is not None:
            raise self.error
        return self

    def __iter__(self) -> Iterator:
        return iter((self.stdout, self.stderr, self.error))
