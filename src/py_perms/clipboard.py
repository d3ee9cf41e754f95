"""Clipboard — hand a generated command to the outside world.

This is the one place where the simulator reaches beyond itself.  The
presentation layer calls ``Clipboard.copy`` with a command string; the
clipboard passes it to a **writer** and lights a short-lived "copied"
indicator.  The default writer is an in-memory buffer, so tests and the
web server need no desktop clipboard; the REPL uses
``system_clipboard_writer``, which pipes the text into the platform copy
tool (``pbcopy``, ``clip``, ``wl-copy``, ``xclip`` or ``xsel``).

The indicator is purely cosmetic: it switches off again after
``reset_after`` seconds, measured with a monotonic clock so that wall
clock changes cannot keep it lit.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
import time
from collections.abc import Callable
from typing import TypeAlias

Writer: TypeAlias = Callable[[str], None]
MonotonicClock: TypeAlias = Callable[[], float]

DEFAULT_RESET_SECONDS = 2.0


class ClipboardError(Exception):
    """Raised when the writer fails to accept the text."""


def _clipboard_commands() -> list[list[str]]:
    """Return the copy tools to try on this platform, in preference order."""
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def system_clipboard_writer(text: str) -> None:
    """Write *text* to the desktop clipboard through the platform's copy tool.

    Tries ``pbcopy`` on macOS, ``clip`` on Windows, and ``wl-copy``,
    ``xclip`` or ``xsel`` elsewhere, stopping at the first that succeeds.

    Raises:
        ClipboardError: If no tool is installed or every tool fails.

    """
    tried: list[str] = []
    for command in _clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        tried.append(command[0])
        proc = subprocess.run(command, input=text, text=True, check=False)  # noqa: S603
        if proc.returncode == 0:
            return
    if not tried:
        msg = "no clipboard tool found (install wl-copy, xclip or xsel)"
        raise ClipboardError(msg)
    msg = f"clipboard tool failed: {', '.join(tried)}"
    raise ClipboardError(msg)


class Clipboard:
    """Copy target with a self-clearing "copied" indicator."""

    def __init__(
        self,
        *,
        writer: Writer | None = None,
        reset_after: float = DEFAULT_RESET_SECONDS,
        clock: MonotonicClock = time.monotonic,
    ) -> None:
        """Create a clipboard.

        Args:
            writer: Receives copied text.  Defaults to an internal buffer.
            reset_after: Seconds the "copied" indicator stays on.
            clock: Monotonic time source, in seconds.

        """
        self._writer: Writer = writer or self._buffer_write
        self._reset_after = reset_after
        self._clock = clock
        self._buffer: str | None = None
        self._copied: str | None = None
        self._copied_at = 0.0

    def _buffer_write(self, text: str) -> None:
        self._buffer = text

    @property
    def contents(self) -> str | None:
        """Return the text held by the built-in buffer, if it was used."""
        return self._buffer

    def copy(self, command: str) -> None:
        """Send *command* to the writer and light the indicator.

        Raises:
            ClipboardError: If the writer fails.  The indicator is not lit.

        """
        try:
            self._writer(command)
        except Exception as e:  # noqa: BLE001
            msg = f"Failed to copy command: {e}"
            raise ClipboardError(msg) from e
        self._copied = command
        self._copied_at = self._clock()

    @property
    def copied_command(self) -> str | None:
        """Return the last copied command while the indicator is lit."""
        if self._copied is None:
            return None
        if self._clock() - self._copied_at >= self._reset_after:
            self._copied = None
        return self._copied

    def is_copied(self, command: str) -> bool:
        """Return True if *command* is the one currently marked as copied."""
        return self.copied_command == command
