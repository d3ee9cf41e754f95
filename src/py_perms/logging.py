"""Audit log for the permission simulator.

Every change made to the catalog is written here: chmod, chown, a new
umask, a freshly created file, and also the requests the catalog
refused.  Records are numbered in the order they happened and tagged
with the catalog entry they concern, so the log can answer two
questions:

- *What happened in this session?*  ``Logger.entries`` in order.
- *What happened to this file?*  ``Logger.history(entry_id)`` gives one
  entry's chmod/chown/create trail, which the shell shows as
  ``log NAME``.

Session-wide events such as a umask change carry no entry id.
"""

from dataclasses import dataclass
from enum import IntEnum
from itertools import count


class LogLevel(IntEnum):
    """Severity levels, ordered so ``min_level`` filtering can use ``>=``."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One audit record.

    Attributes:
        sequence: Position in the session, starting at 1.
        level: Severity of the event.
        message: What happened, phrased as the equivalent command
            where there is one (``chmod 600 notes.txt``).
        source: The component that wrote the record.
        entry_id: The catalog entry the event concerns, or ``None`` for
            session-wide events.

    """

    sequence: int
    level: LogLevel
    message: str
    source: str
    entry_id: str | None = None

    def __str__(self) -> str:
        """Format as ``  3 [INFO] catalog: chmod 600 notes.txt``."""
        return f"{self.sequence:>3} [{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only audit buffer, queryable by level, source and entry."""

    def __init__(self) -> None:
        """Create an empty log."""
        self._records: list[LogEntry] = []
        self._sequence = count(start=1)

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every record, oldest first."""
        return list(self._records)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        entry_id: str | None = None,
    ) -> LogEntry:
        """Append a record and return it."""
        record = LogEntry(
            sequence=next(self._sequence),
            level=level,
            message=message,
            source=source,
            entry_id=entry_id,
        )
        self._records.append(record)
        return record

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        entry_id: str | None = None,
    ) -> list[LogEntry]:
        """Return the records that pass every given criterion.

        Args:
            min_level: Keep records at or above this level.
            source: Keep records written by this component.
            entry_id: Keep records about this catalog entry.

        """
        return [
            record
            for record in self._records
            if (min_level is None or record.level >= min_level)
            and (source is None or record.source == source)
            and (entry_id is None or record.entry_id == entry_id)
        ]

    def history(self, entry_id: str) -> list[LogEntry]:
        """Return the changes made to one entry (INFO and above)."""
        return self.filter(min_level=LogLevel.INFO, entry_id=entry_id)

    def clear(self) -> None:
        """Drop every record; numbering carries on where it left off."""
        self._records.clear()
