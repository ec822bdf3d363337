"""Print sinks: where dispatched files go to be printed."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence


class PrintSinkError(Exception):
    """The sink could not hand a file to the printer."""


class SystemPrintSink:
    """
    Sends files to the host's printer.

    On Windows the file is opened with the shell "print" verb, so the
    registered application prints it to the default printer. Elsewhere the
    configured command (default: lp) is run with the file path as its last
    argument, without a shell.

    submit() returns once the OS has accepted the request; what the printer
    does afterwards is not observable here.
    """

    def __init__(
        self,
        command: str | Sequence[str] = "lp",
        timeout_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.command: List[str] = shlex.split(command) if isinstance(command, str) else list(command)
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(__name__)

    def submit(self, file_path: Path) -> None:
        """
        Hand one file to the printer.

        Raises:
            PrintSinkError: If the OS rejects the request
        """
        if sys.platform == "win32":
            try:
                os.startfile(str(file_path), "print")
            except OSError as e:
                raise PrintSinkError(str(e)) from e
            return

        args = [*self.command, str(file_path)]
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise PrintSinkError(str(e)) from e

        if completed.returncode != 0:
            reason = (completed.stderr or completed.stdout or "").strip()
            raise PrintSinkError(reason or f"{args[0]} exited with {completed.returncode}")

        self.logger.debug(f"{args[0]}: {completed.stdout.strip()}")


class StubPrintSink:
    """
    Records files instead of printing them.

    For development machines without a printer, and for tests.
    Thread-safe: several dispatch threads may submit at once.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._submitted: List[Path] = []

    def submit(self, file_path: Path) -> None:
        with self._lock:
            self._submitted.append(Path(file_path))
        self.logger.info(f"Stub: would print {file_path}")

    @property
    def submitted(self) -> List[Path]:
        with self._lock:
            return list(self._submitted)


def create_print_sink(kind: str, command: str = "lp", timeout_seconds: float = 30.0):
    """Build the sink named by the PRINT_SINK setting ("system" or "stub")."""
    if kind == "stub":
        return StubPrintSink()
    if kind == "system":
        return SystemPrintSink(command, timeout_seconds=timeout_seconds)
    raise ValueError(f"Unknown PRINT_SINK: {kind!r} (expected 'system' or 'stub')")
