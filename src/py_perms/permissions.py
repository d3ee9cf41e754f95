"""Permission sets — the nine bits behind every ``ls -l`` line.

Unix stores a file's access rights as nine bits, split into three
**classes** of three bits each:

- **owner** (``u``) — the user who owns the file.
- **group** (``g``) — members of the file's group.
- **other** (``o``) — everyone else.

Each class carries the same three flags: **read** (``r``), **write**
(``w``) and **execute** (``x``).  The same nine bits can be written
three ways, and this module converts between all of them:

- **Structural** — ``PermissionSet(owner=..., group=..., other=...)``.
- **Symbolic** — ``"rwxr-xr-x"``, nine characters, owner first.
- **Numeric** — ``"755"``, one octal digit per class where
  read = 4, write = 2 and execute = 1.

Design choices:
    - **Frozen dataclasses.**  A permission class is a value; editing one
      checkbox produces a new ``PermissionSet`` rather than mutating the
      old one.  Equality and hashing come for free.
    - **A closed triple.**  The three classes are named fields in a fixed
      order, iterated through ``ClassName`` — there is no way to build a
      set with two or four classes.
    - **Digits, not values.**  ``to_numeric`` concatenates three per-class
      digits.  Each digit is built from exactly three bits so it always
      lands in 0–7.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import IntFlag, StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_READ = 4
_WRITE = 2
_EXECUTE = 1

_MAX_MODE = 0o777
_MAX_DIGIT = 7
_NUMERIC_RE = re.compile(r"[0-7]{1,3}")
_CLAUSE_RE = re.compile(r"([ugoa]*)([-+=])([rwx]*)")


class InvalidFormatError(ValueError):
    """Raised when permission or umask text cannot be parsed."""


class Permission(IntFlag):
    """The nine permission bits, as ``stat.st_mode`` lays them out."""

    OWNER_READ = 0o400
    OWNER_WRITE = 0o200
    OWNER_EXECUTE = 0o100
    GROUP_READ = 0o040
    GROUP_WRITE = 0o020
    GROUP_EXECUTE = 0o010
    OTHER_READ = 0o004
    OTHER_WRITE = 0o002
    OTHER_EXECUTE = 0o001


class ClassName(StrEnum):
    """The three permission classes, in serialisation order."""

    OWNER = "owner"
    GROUP = "group"
    OTHER = "other"

    @property
    def who(self) -> str:
        """Return the chmod letter for this class (``u``, ``g`` or ``o``)."""
        return _WHO_LETTERS[self]

    @property
    def shift(self) -> int:
        """Return how far this class's digit sits from the low bits."""
        return _SHIFTS[self]


_WHO_LETTERS: dict[ClassName, str] = {
    ClassName.OWNER: "u",
    ClassName.GROUP: "g",
    ClassName.OTHER: "o",
}
_SHIFTS: dict[ClassName, int] = {
    ClassName.OWNER: 6,
    ClassName.GROUP: 3,
    ClassName.OTHER: 0,
}


@dataclass(frozen=True)
class PermissionClass:
    """Read/write/execute flags for one class of users."""

    read: bool = False
    write: bool = False
    execute: bool = False

    @classmethod
    def from_digit(cls, digit: int) -> PermissionClass:
        """Decode a single octal digit (0–7) into flags.

        Raises:
            InvalidFormatError: If the digit is outside 0–7.

        """
        if not 0 <= digit <= _MAX_DIGIT:
            msg = f"Permission digit must be 0-7, got {digit}"
            raise InvalidFormatError(msg)
        return cls(
            read=bool(digit & _READ),
            write=bool(digit & _WRITE),
            execute=bool(digit & _EXECUTE),
        )

    @property
    def digit(self) -> int:
        """Return the octal digit: 4 for read, 2 for write, 1 for execute."""
        return _READ * self.read + _WRITE * self.write + _EXECUTE * self.execute

    @property
    def symbolic(self) -> str:
        """Return the three-character form, e.g. ``r-x``."""
        return (
            ("r" if self.read else "-")
            + ("w" if self.write else "-")
            + ("x" if self.execute else "-")
        )

    @property
    def letters(self) -> str:
        """Return only the set letters, e.g. ``rx`` (empty if none)."""
        return self.symbolic.replace("-", "")


@dataclass(frozen=True)
class PermissionSet:
    """The full owner/group/other permission triple."""

    owner: PermissionClass = PermissionClass()
    group: PermissionClass = PermissionClass()
    other: PermissionClass = PermissionClass()

    def get(self, name: ClassName) -> PermissionClass:
        """Return the flags for one class."""
        return getattr(self, name.value)

    def classes(self) -> Iterator[tuple[ClassName, PermissionClass]]:
        """Yield ``(name, flags)`` pairs in owner, group, other order."""
        for name in ClassName:
            yield name, self.get(name)

    def with_class(self, name: ClassName, flags: PermissionClass) -> PermissionSet:
        """Return a copy with one class replaced wholesale."""
        return replace(self, **{name.value: flags})

    def with_flag(self, name: ClassName, flag: str, *, value: bool) -> PermissionSet:
        """Return a copy with a single flag of one class changed.

        Args:
            name: Which class to edit.
            flag: ``"read"``, ``"write"`` or ``"execute"``.
            value: The new flag value.

        Raises:
            ValueError: If *flag* is not one of the three flag names.

        """
        if flag not in ("read", "write", "execute"):
            msg = f"Unknown permission flag: {flag}"
            raise ValueError(msg)
        return self.with_class(name, replace(self.get(name), **{flag: value}))


def to_symbolic(permissions: PermissionSet) -> str:
    """Return the nine-character symbolic form, e.g. ``rwxr-xr--``."""
    return "".join(flags.symbolic for _name, flags in permissions.classes())


def to_numeric(permissions: PermissionSet) -> str:
    """Return the three-digit numeric form, e.g. ``754``.

    Each class contributes one digit; the digits are concatenated
    rather than summed as an octal value.
    """
    return "".join(str(flags.digit) for _name, flags in permissions.classes())


def to_mode(permissions: PermissionSet) -> int:
    """Return the permission bits as an integer (``0o754`` for ``754``)."""
    mode = 0
    for name, flags in permissions.classes():
        mode |= flags.digit << name.shift
    return mode


def from_mode(mode: int) -> PermissionSet:
    """Decode integer permission bits into a ``PermissionSet``.

    Raises:
        InvalidFormatError: If *mode* is outside ``0..0o777``.

    """
    if not 0 <= mode <= _MAX_MODE:
        msg = f"Mode out of range: {mode:o}"
        raise InvalidFormatError(msg)
    bits = Permission(mode)
    return PermissionSet(
        owner=PermissionClass(
            read=Permission.OWNER_READ in bits,
            write=Permission.OWNER_WRITE in bits,
            execute=Permission.OWNER_EXECUTE in bits,
        ),
        group=PermissionClass(
            read=Permission.GROUP_READ in bits,
            write=Permission.GROUP_WRITE in bits,
            execute=Permission.GROUP_EXECUTE in bits,
        ),
        other=PermissionClass(
            read=Permission.OTHER_READ in bits,
            write=Permission.OTHER_WRITE in bits,
            execute=Permission.OTHER_EXECUTE in bits,
        ),
    )


def from_numeric(text: str) -> PermissionSet:
    """Parse a numeric permission string such as ``"755"`` or ``"7"``.

    Short strings are read as octal numbers, so ``"7"`` means ``007``.

    Raises:
        InvalidFormatError: If *text* is not 1–3 digits in 0–7.

    """
    if _NUMERIC_RE.fullmatch(text) is None:
        msg = f"Invalid numeric permissions: {text!r} (expected 1-3 octal digits)"
        raise InvalidFormatError(msg)
    return from_mode(int(text, 8))


def from_symbolic(text: str) -> PermissionSet:
    """Parse a nine-character symbolic string such as ``"rw-r--r--"``.

    Raises:
        InvalidFormatError: If *text* is not nine characters, or a
            position holds anything other than its letter or ``-``.

    """
    expected = "rwx" * 3
    if len(text) != len(expected):
        msg = f"Invalid symbolic permissions: {text!r} (expected 9 characters)"
        raise InvalidFormatError(msg)
    mode = 0
    for position, (char, letter) in enumerate(zip(text, expected, strict=True)):
        if char == letter:
            mode |= 1 << (len(expected) - 1 - position)
        elif char != "-":
            msg = f"Invalid symbolic permissions: {text!r} ({char!r} at position {position + 1})"
            raise InvalidFormatError(msg)
    return from_mode(mode)


def to_chmod_symbolic_argument(permissions: PermissionSet) -> str:
    """Return the ``u=...,g=...,o=...`` argument for a symbolic chmod.

    Only set letters are listed, so a class with no bits renders as an
    empty assignment: ``u=rw,g=r,o=``.
    """
    return ",".join(f"{name.who}={flags.letters}" for name, flags in permissions.classes())


def apply_symbolic_mode(permissions: PermissionSet, clauses: str) -> PermissionSet:
    """Apply chmod-style symbolic clauses like ``u+x,go-w`` or ``a=r``.

    Each clause is ``[ugoa]*`` followed by ``+``, ``-`` or ``=`` and
    ``[rwx]*``.  An empty class list means all three classes.

    Raises:
        InvalidFormatError: If any clause is malformed.

    """
    result = permissions
    for clause in clauses.split(","):
        match = _CLAUSE_RE.fullmatch(clause)
        if match is None:
            msg = f"Invalid symbolic mode: {clause!r}"
            raise InvalidFormatError(msg)
        who, op, letters = match.groups()
        targets = (
            list(ClassName)
            if not who or "a" in who
            else [name for name in ClassName if name.who in who]
        )
        change = PermissionClass(read="r" in letters, write="w" in letters, execute="x" in letters)
        for name in targets:
            current = result.get(name)
            if op == "=":
                updated = change
            elif op == "+":
                updated = PermissionClass.from_digit(current.digit | change.digit)
            else:
                updated = PermissionClass.from_digit(current.digit & ~change.digit)
            result = result.with_class(name, updated)
    return result
