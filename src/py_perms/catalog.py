"""The catalog — a pretend filesystem to practise chmod, chown and umask on.

The catalog is a flat, in-memory list of **entries**.  Each entry is
either a regular file or a directory, and carries exactly what
``ls -l`` would show about it: a name, an owner, a group and a
permission set.  Nothing touches the real disk.

The catalog is also the *session*: it holds the current umask and the
currently selected entry.  Both live on the catalog object rather than
in module globals, so two catalogs never interfere.

Design choices:
    - **Selection by id.**  The catalog remembers *which* entry is
      selected, not a copy of it.  ``selected`` looks the id up on every
      read, so a chmod on the selected entry is visible immediately.
    - **Loud failures.**  Asking for an id that does not exist raises
      ``NotFoundError`` instead of quietly doing nothing.
    - **Validated umask.**  ``set_umask`` refuses bad text before it is
      stored, so a broken umask can never reach ``create_entry``.
    - **Audit trail.**  Every mutation is written to the catalog's
      ``Logger``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from itertools import count
from typing import TYPE_CHECKING, Any, TypeAlias

from py_perms.logging import Logger, LogLevel
from py_perms.permissions import InvalidFormatError, PermissionSet, from_numeric, to_numeric
from py_perms.umask import DEFAULT_UMASK, compute_default, is_valid_umask

if TYPE_CHECKING:
    from py_perms.config import SimulatorConfig

Clock: TypeAlias = Callable[[], datetime]

DEFAULT_OWNER = "user"
DEFAULT_GROUP = "staff"

# Suggestions offered for chown; any valid name is accepted.
COMMON_OWNERS: tuple[str, ...] = ("alice", "bob", "charlie", "root", "www-data", "nobody")
COMMON_GROUPS: tuple[str, ...] = ("staff", "admin", "developers", "users", "wheel", "www-data")

# Whitespace and ":" would break the generated chown command.
_ACCOUNT_NAME_RE = re.compile(r"[^\s:]+")

_SOURCE = "catalog"


class NotFoundError(LookupError):
    """Raised when an operation names an entry id that does not exist."""


class EntryKind(StrEnum):
    """What an entry represents."""

    FILE = "file"
    DIRECTORY = "directory"

    @property
    def is_container(self) -> bool:
        """Return True for kinds that hold other entries."""
        return self is EntryKind.DIRECTORY


@dataclass
class Entry:
    """One file or directory in the catalog.

    ``entry_id`` is assigned by the catalog and never changes.  Names
    need not be unique.  ``size`` is only meaningful for files and is
    ``None`` for directories.
    """

    entry_id: str
    name: str
    kind: EntryKind
    owner: str
    group: str
    permissions: PermissionSet
    size: int | None = None
    modified_at: datetime | None = None

    @property
    def is_directory(self) -> bool:
        """Return True if this entry is a directory."""
        return self.kind.is_container


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class _Seed:
    name: str
    kind: EntryKind
    owner: str
    group: str
    mode: str
    size: int | None
    modified_at: datetime


_SAMPLE_ENTRIES: tuple[_Seed, ...] = (
    _Seed(
        "document.txt", EntryKind.FILE, "alice", "staff", "644", 2048,
        datetime(2024, 1, 15, tzinfo=UTC),
    ),
    _Seed(
        "script.sh", EntryKind.FILE, "bob", "developers", "754", 1024,
        datetime(2024, 1, 20, tzinfo=UTC),
    ),
    _Seed(
        "project", EntryKind.DIRECTORY, "alice", "developers", "755", None,
        datetime(2024, 1, 22, tzinfo=UTC),
    ),
    _Seed(
        "config.json", EntryKind.FILE, "root", "admin", "640", 512,
        datetime(2024, 1, 10, tzinfo=UTC),
    ),
    _Seed(
        "logs", EntryKind.DIRECTORY, "system", "admin", "770", None,
        datetime(2024, 1, 25, tzinfo=UTC),
    ),
)


class Catalog:
    """An in-memory collection of entries plus the session's umask and selection."""

    def __init__(
        self,
        *,
        umask: str = DEFAULT_UMASK,
        default_owner: str = DEFAULT_OWNER,
        default_group: str = DEFAULT_GROUP,
        clock: Clock | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create an empty catalog.

        Args:
            umask: The starting umask (three octal digits, or empty).
            default_owner: Owner stamped on entries made by ``create_entry``.
            default_group: Group stamped on entries made by ``create_entry``.
            clock: Returns the current time; used for ``modified_at``.
            logger: Audit log to write to (a fresh one if omitted).

        Raises:
            InvalidFormatError: If *umask* is not a valid umask.

        """
        if not is_valid_umask(umask):
            msg = f"Invalid umask: {umask!r} (expected three octal digits)"
            raise InvalidFormatError(msg)
        self._umask = umask
        self._default_owner = default_owner
        self._default_group = default_group
        self._clock: Clock = clock or _utc_now
        self._logger = logger or Logger()
        self._id_counter = count(start=1)
        self._entries: dict[str, Entry] = {}
        self._selected_id: str | None = None

    @classmethod
    def with_sample_entries(cls, **options: Any) -> Catalog:
        """Create a catalog pre-filled with five demonstration entries."""
        catalog = cls(**options)
        for seed in _SAMPLE_ENTRIES:
            catalog.add_entry(
                seed.name,
                seed.kind,
                permissions=from_numeric(seed.mode),
                owner=seed.owner,
                group=seed.group,
                size=seed.size,
                modified_at=seed.modified_at,
            )
        return catalog

    # -- queries ---------------------------------------------------------------

    @property
    def logger(self) -> Logger:
        """Return the catalog's audit log."""
        return self._logger

    @property
    def umask(self) -> str:
        """Return the current umask text."""
        return self._umask

    @property
    def entries(self) -> list[Entry]:
        """Return all entries in creation order."""
        return list(self._entries.values())

    @property
    def selected(self) -> Entry | None:
        """Return the selected entry, looked up fresh on every access."""
        if self._selected_id is None:
            return None
        return self._entries.get(self._selected_id)

    def get(self, entry_id: str) -> Entry:
        """Return the entry with the given id.

        Raises:
            NotFoundError: If no entry has that id.

        """
        entry = self._entries.get(entry_id)
        if entry is None:
            msg = f"No entry with id {entry_id!r}"
            raise NotFoundError(msg)
        return entry

    def find(self, name: str) -> list[Entry]:
        """Return every entry called *name* (names are not unique)."""
        return [e for e in self._entries.values() if e.name == name]

    # -- mutations -------------------------------------------------------------

    def select(self, entry_id: str) -> Entry:
        """Make the given entry the current selection.

        Raises:
            NotFoundError: If no entry has that id.

        """
        entry = self.get(entry_id)
        self._selected_id = entry_id
        self._logger.log(
            LogLevel.DEBUG, f"Selected {entry.name}", source=_SOURCE, entry_id=entry_id
        )
        return entry

    def set_permissions(self, entry_id: str, permissions: PermissionSet) -> Entry:
        """Replace an entry's permissions (``chmod``).

        Raises:
            NotFoundError: If no entry has that id.

        """
        entry = self.get(entry_id)
        entry.permissions = permissions
        self._logger.log(
            LogLevel.INFO,
            f"chmod {to_numeric(permissions)} {entry.name}",
            source=_SOURCE,
            entry_id=entry_id,
        )
        return entry

    def set_ownership(self, entry_id: str, owner: str, group: str) -> Entry:
        """Replace an entry's owner and group (``chown``).

        Raises:
            NotFoundError: If no entry has that id.
            ValueError: If *owner* or *group* is empty or contains
                whitespace or ``:``.  The entry is left unchanged.

        """
        entry = self.get(entry_id)
        if not owner or not group:
            msg = "Owner and group must not be empty"
            raise ValueError(msg)
        for name in (owner, group):
            if _ACCOUNT_NAME_RE.fullmatch(name) is None:
                self._logger.log(
                    LogLevel.WARNING,
                    f"Rejected owner/group {owner!r}:{group!r} for {entry.name}",
                    source=_SOURCE,
                    entry_id=entry_id,
                )
                msg = f"Invalid owner or group name: {name!r} (no spaces or ':')"
                raise ValueError(msg)
        entry.owner = owner
        entry.group = group
        self._logger.log(
            LogLevel.INFO,
            f"chown {owner}:{group} {entry.name}",
            source=_SOURCE,
            entry_id=entry_id,
        )
        return entry

    def set_umask(self, umask: str) -> str:
        """Replace the session umask, returning the previous value.

        Existing entries keep their permissions; only entries created
        afterwards see the new umask.

        Raises:
            InvalidFormatError: If *umask* is not three octal digits or
                empty.  The current umask is left unchanged.

        """
        if not is_valid_umask(umask):
            self._logger.log(LogLevel.WARNING, f"Rejected umask {umask!r}", source=_SOURCE)
            msg = f"Invalid umask: {umask!r} (expected three octal digits)"
            raise InvalidFormatError(msg)
        previous, self._umask = self._umask, umask
        self._logger.log(LogLevel.INFO, f"umask {umask or '000'}", source=_SOURCE)
        return previous

    def create_entry(self, name: str, kind: EntryKind) -> Entry:
        """Create a new entry whose permissions come from the current umask.

        The new entry is owned by the catalog's default identity and is
        not selected.

        Raises:
            ValueError: If *name* is blank.

        """
        entry = self.add_entry(
            name,
            kind,
            permissions=compute_default(self._umask, is_container=kind.is_container),
            owner=self._default_owner,
            group=self._default_group,
            size=None if kind.is_container else 0,
        )
        self._logger.log(
            LogLevel.INFO,
            f"Created {kind} {entry.name} with mode {to_numeric(entry.permissions)} "
            f"(umask {self._umask or '000'})",
            source=_SOURCE,
            entry_id=entry.entry_id,
        )
        return entry

    def add_entry(  # noqa: PLR0913
        self,
        name: str,
        kind: EntryKind,
        *,
        permissions: PermissionSet,
        owner: str,
        group: str,
        size: int | None = None,
        modified_at: datetime | None = None,
    ) -> Entry:
        """Insert an entry with explicit permissions and ownership.

        Raises:
            ValueError: If *name* is blank.

        """
        name = name.strip()
        if not name:
            msg = "Entry name must not be empty"
            raise ValueError(msg)
        entry = Entry(
            entry_id=str(next(self._id_counter)),
            name=name,
            kind=kind,
            owner=owner,
            group=group,
            permissions=permissions,
            size=size,
            modified_at=modified_at or self._clock(),
        )
        self._entries[entry.entry_id] = entry
        return entry


def build_catalog(config: SimulatorConfig) -> Catalog:
    """Create the session catalog described by *config*."""
    options = {
        "umask": config.umask,
        "default_owner": config.default_owner,
        "default_group": config.default_group,
    }
    if config.seed_samples:
        return Catalog.with_sample_entries(**options)
    return Catalog(**options)
