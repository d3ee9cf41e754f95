"""Umask — the bits a new file is *not* allowed to have.

When a program creates a file it asks for a generous base mode, and
the kernel strips whatever bits the process's **umask** names:

    effective = base & ~umask

The base mode is fixed by convention:

- Regular files start from ``666`` (``rw-rw-rw-``).  Nobody gets the
  execute bit by accident; you add it yourself with ``chmod +x``.
- Directories start from ``777`` (``rwxrwxrwx``), because on a directory
  the execute bit means "may enter", and a directory you cannot enter
  is not much use.

So the common umask ``022`` ("take write away from group and other")
yields ``644`` for files and ``755`` for directories.

The umask itself is written as three octal digits.  An empty string is
accepted as shorthand for ``000`` (no restriction).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from py_perms.permissions import (
    InvalidFormatError,
    PermissionSet,
    from_mode,
    to_numeric,
    to_symbolic,
)

FILE_BASE_MODE = 0o666
DIRECTORY_BASE_MODE = 0o777
DEFAULT_UMASK = "022"

_UMASK_INPUT_RE = re.compile(r"[0-7]{3}")
_UMASK_PARSE_RE = re.compile(r"[0-7]{1,3}")


@dataclass(frozen=True)
class UmaskPreset:
    """A commonly used umask value and what it produces."""

    value: str
    description: str


COMMON_UMASKS: tuple[UmaskPreset, ...] = (
    UmaskPreset("022", "Standard (755/644)"),
    UmaskPreset("002", "Group writable (775/664)"),
    UmaskPreset("077", "Private (700/600)"),
    UmaskPreset("000", "No restrictions (777/666)"),
)


@dataclass(frozen=True)
class UmaskPreview:
    """Default permissions for new files and directories under one umask."""

    umask: str
    file: PermissionSet
    directory: PermissionSet

    def lines(self) -> list[str]:
        """Return a two-line ``symbolic (numeric)`` summary."""
        return [
            f"New files:       {to_symbolic(self.file)} ({to_numeric(self.file)})",
            f"New directories: {to_symbolic(self.directory)} ({to_numeric(self.directory)})",
        ]


def is_valid_umask(text: str) -> bool:
    """Return True if *text* may be committed as the current umask.

    Only exactly three octal digits, or the empty string, pass.
    """
    return text == "" or _UMASK_INPUT_RE.fullmatch(text) is not None


def normalize_umask(text: str) -> str:
    """Return the three-digit form of a valid umask (``""`` becomes ``"000"``).

    Raises:
        InvalidFormatError: If *text* fails ``is_valid_umask``.

    """
    if not is_valid_umask(text):
        msg = f"Invalid umask: {text!r} (expected three octal digits)"
        raise InvalidFormatError(msg)
    return text or "000"


def parse_umask(text: str) -> int:
    """Return the umask as an integer bitmask.

    Raises:
        InvalidFormatError: If *text* is neither empty nor 1–3 octal digits.

    """
    if text == "":
        return 0
    if _UMASK_PARSE_RE.fullmatch(text) is None:
        msg = f"Invalid umask: {text!r} (expected 1-3 octal digits)"
        raise InvalidFormatError(msg)
    return int(text, 8)


def compute_default(umask: str, *, is_container: bool) -> PermissionSet:
    """Return the permissions a new entry receives under *umask*.

    Args:
        umask: The current umask as octal text (``""`` means ``000``).
        is_container: True for a directory, False for a regular file.

    Returns:
        The base mode with the umask bits removed.

    """
    base = DIRECTORY_BASE_MODE if is_container else FILE_BASE_MODE
    return from_mode(base & ~parse_umask(umask))


def preview(umask: str) -> UmaskPreview:
    """Return the defaults for both entry kinds under *umask*."""
    return UmaskPreview(
        umask=normalize_umask(umask),
        file=compute_default(umask, is_container=False),
        directory=compute_default(umask, is_container=True),
    )
