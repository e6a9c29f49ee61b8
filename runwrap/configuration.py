"""Typed helpers for parsing runwrap configuration files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

from dotenv import dotenv_values

from runwrap.exceptions import ConfigError, InvalidOptionsError
from runwrap.execution.base import Options, TextWriter, parse_env_entries


def _ensure_path(
    value: Optional[str | Path],
    *,
    config_root: Path,
) -> Optional[Path]:
    if value is None or value == "":
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (config_root / path).resolve()
    return path


def _coerce_env(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, dict):
        return tuple(f"{key}={val}" for key, val in value.items())
    if isinstance(value, (list, tuple)):
        entries = tuple(str(item) for item in value)
        try:
            parse_env_entries(entries)
        except InvalidOptionsError as exc:
            raise ConfigError(str(exc)) from exc
        return entries
    raise ConfigError(
        f"execution.env must be a list or mapping, got {type(value).__name__}"
    )


@dataclass(frozen=True)
class ExecutionSettings:
    dir: Optional[Path] = None
    env: Tuple[str, ...] = ()
    env_file: Optional[Path] = None

    def environment(self, extra: Iterable[str] = ()) -> Dict[str, str]:
        """Combine the dotenv file, configured entries, then ``extra``."""

        merged: Dict[str, str] = {}
        if self.env_file is not None:
            if not self.env_file.is_file():
                raise ConfigError(f"env file '{self.env_file}' not found.")
            for key, value in dotenv_values(self.env_file).items():
                if value is not None:
                    merged[key] = value
        merged.update(parse_env_entries(self.env))
        merged.update(parse_env_entries(tuple(extra)))
        return merged

    def to_options(
        self,
        *,
        extra_env: Iterable[str] = (),
        stdout: Optional[TextWriter] = None,
        stderr: Optional[TextWriter] = None,
    ) -> Options:
        env = self.environment(extra_env)
        return Options(
            dir=self.dir,
            env=[f"{key}={value}" for key, value in env.items()],
            stdout=stdout,
            stderr=stderr,
        )


def build_execution_settings(
    config: Dict[str, Any], *, config_root: Path
) -> ExecutionSettings:
    if not isinstance(config, dict):
        raise ConfigError("config root must be a mapping")
    exec_cfg = config.get("execution") or {}
    if not isinstance(exec_cfg, dict):
        raise ConfigError("'execution' section must be a mapping")
    unknown = set(exec_cfg) - {"dir", "env", "env_file"}
    if unknown:
        raise ConfigError(
            f"unknown execution keys: {', '.join(sorted(unknown))}"
        )
    return ExecutionSettings(
        dir=_ensure_path(exec_cfg.get("dir"), config_root=config_root),
        env=_coerce_env(exec_cfg.get("env")),
        env_file=_ensure_path(
            exec_cfg.get("env_file"), config_root=config_root
        ),
    )


def load_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Config file '{config_path}' not found.")
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"Config file '{config_path}' is not valid YAML: {exc}"
        ) from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{config_path}' must hold a mapping.")
    return data


def load_execution_settings(config_path: Path) -> ExecutionSettings:
    config_path = config_path.resolve()
    return build_execution_settings(
        load_config(config_path), config_root=config_path.parent
    )


__all__ = [
    "ExecutionSettings",
    "build_execution_settings",
    "load_config",
    "load_execution_settings",
]
