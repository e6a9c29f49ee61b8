"""Shared fixtures: a fake program placed first on PATH."""

from __future__ import annotations

import logging
import os
import sys

from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fake_executable import FAKE_NAME, write_fake_executable  # noqa: E402
from runwrap.execution import Executable  # noqa: E402
from runwrap.logging import DEFAULT_LOGGER_NAME  # noqa: E402


def _prepend_path(monkeypatch: pytest.MonkeyPatch, directory: Path) -> None:
    current = os.environ.get("PATH", "")
    monkeypatch.setenv("PATH", os.pathsep.join([str(directory), current]))


@pytest.fixture()
def fake_bin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Directory on PATH holding a well-behaved fake program."""

    bin_dir = tmp_path / "bin"
    write_fake_executable(bin_dir)
    _prepend_path(monkeypatch, bin_dir)
    return bin_dir


@pytest.fixture()
def failing_bin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Directory on PATH holding a fake program that always exits 1."""

    bin_dir = tmp_path / "failing-bin"
    write_fake_executable(bin_dir, fail=True)
    _prepend_path(monkeypatch, bin_dir)
    return bin_dir


@pytest.fixture()
def executable(fake_bin: Path) -> Executable:
    return Executable(FAKE_NAME)


@pytest.fixture()
def workdir(tmp_path: Path) -> Path:
    """A resolved directory so cwd comparisons survive symlinked tmp roots."""

    path = tmp_path / "work"
    path.mkdir()
    return path.resolve()


@pytest.fixture(autouse=True)
def _reset_runwrap_logger():
    """Drop CLI-installed handlers and levels so tests stay independent."""

    yield
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_runwrap_tag", None) is not None:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
