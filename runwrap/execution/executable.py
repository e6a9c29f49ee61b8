"""Runs one external program per call and captures its output."""

from __future__ import annotations

import codecs
import errno
import io
import logging
import os
import shutil
import subprocess
import threading

from dataclasses import dataclass, field
from typing import IO, List, Optional

from runwrap.exceptions import ExecutionError, ExitStatusError, LaunchError
from runwrap.logging import get_logger, redact

from .base import ExecutionResult, Options, TextWriter
from .fanout import FanOutWriter

_CHUNK_SIZE = 8192


class _StreamCapture:
    """Drains one child pipe into an internal buffer plus an optional writer."""

    def __init__(self, label: str, forward: Optional[TextWriter]) -> None:
        self.label = label
        self.error: Optional[Exception] = None
        self._buffer = io.StringIO()
        self._writer = FanOutWriter(self._buffer, forward)
        self._thread: Optional[threading.Thread] = None

    def start(self, stream: IO[bytes]) -> None:
        self._thread = threading.Thread(
            target=self._drain,
            args=(stream,),
            name=f"runwrap-{self.label}",
            daemon=True,
        )
        self._thread.start()

    def join(self) -> str:
        if self._thread is not None:
            self._thread.join()
        return self._buffer.getvalue()

    def _drain(self, stream: IO[bytes]) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        with stream:
            while True:
                chunk = stream.read1(_CHUNK_SIZE)  # type: ignore[attr-defined]
                if not chunk:
                    break
                self._emit(decoder.decode(chunk))
        self._emit(decoder.decode(b"", final=True))
        if self.error is None:
            try:
                self._writer.flush()
            except Exception as exc:
                self.error = exc

    def _emit(self, text: str) -> None:
        if not text:
            return
        if self.error is not None:
            # Keep draining so the child never blocks on a full pipe.
            self._buffer.write(text)
            return
        try:
            self._writer.write(text)
        except Exception as exc:
            self.error = exc


@dataclass(frozen=True)
class Executable:
    """A named external program that can be invoked repeatedly."""

    name: str
    logger: logging.Logger = field(
        default_factory=get_logger, repr=False, compare=False
    )

    def execute(
        self, options: Optional[Options] = None, *args: str
    ) -> ExecutionResult:
        """Run the program once with ``args`` and wait for it to exit.

        The child sees ``name`` as argument zero. Launch failures and
        unclean exits are returned on the result rather than raised, along
        with whatever output was captured. Malformed options raise
        :class:`~runwrap.exceptions.InvalidOptionsError` before anything is
        spawned.
        """

        options = options or Options()
        argv = [self.name, *(str(arg) for arg in args)]
        cwd = options.resolved_dir()
        env = options.resolved_env()
        self.logger.info(
            "execute %s args=%s dir=%s env=%s",
            self.name,
            argv[1:],
            cwd or "<inherit>",
            redact(env) if env is not None else "<inherit>",
        )

        try:
            program = self._resolve_program()
            proc = subprocess.Popen(
                argv,
                executable=program,
                cwd=cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            launch_error = self._launch_error(exc)
            self.logger.debug(
                "launch of %s failed: %s", self.name, launch_error
            )
            return ExecutionResult(error=launch_error)

        captures: List[_StreamCapture] = [
            _StreamCapture("stdout", options.stdout),
            _StreamCapture("stderr", options.stderr),
        ]
        captures[0].start(proc.stdout)  # type: ignore[arg-type]
        captures[1].start(proc.stderr)  # type: ignore[arg-type]
        returncode = proc.wait()
        stdout, stderr = (capture.join() for capture in captures)

        error: Optional[ExecutionError] = None
        if returncode != 0:
            error = ExitStatusError(returncode)
        else:
            for capture in captures:
                if capture.error is not None:
                    error = ExecutionError(
                        f"copying {capture.label}: {capture.error}"
                    )
                    error.__cause__ = capture.error
                    break

        self.logger.debug(
            "%s exited with %s (%d chars stdout, %d chars stderr)",
            self.name,
            error or "exit status 0",
            len(stdout),
            len(stderr),
        )
        return ExecutionResult(
            stdout=stdout,
            stderr=stderr,
            error=error,
            returncode=returncode,
        )

    def _resolve_program(self) -> str:
        """Look up bare names on the caller's PATH, not the child's env."""

        separators = [os.sep] + ([os.altsep] if os.altsep else [])
        if any(sep in self.name for sep in separators):
            return self.name
        found = shutil.which(self.name)
        if found is None:
            raise FileNotFoundError(
                errno.ENOENT,
                "executable file not found in $PATH",
                self.name,
            )
        return found

    def _launch_error(self, exc: OSError) -> LaunchError:
        reason = exc.strerror or str(exc)
        if exc.filename and os.fspath(exc.filename) not in (
            self.name,
            shutil.which(self.name),
        ):
            reason = f"{exc.filename}: {reason}"
        error = LaunchError(f'exec: "{self.name}": {reason}')
        error.__cause__ = exc
        return error
