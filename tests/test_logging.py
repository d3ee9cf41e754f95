"""Tests for the audit log.

The catalog writes a numbered record for every change, tagged with the
entry it touched.  The shell reads it back with ``log`` and ``log NAME``.
"""

from py_perms.catalog import Catalog, EntryKind
from py_perms.logging import LogEntry, Logger, LogLevel
from py_perms.permissions import from_numeric
from py_perms.shell import Shell


class TestLogEntry:
    """Verify the record format."""

    def test_str_shows_sequence_level_and_message(self) -> None:
        """Records render like a numbered dmesg line."""
        record = LogEntry(
            sequence=3,
            level=LogLevel.WARNING,
            message="Rejected umask '9'",
            source="catalog",
        )
        assert str(record) == "  3 [WARNING] catalog: Rejected umask '9'"

    def test_session_events_have_no_entry(self) -> None:
        """A umask change is not about any one file."""
        catalog = Catalog()
        catalog.set_umask("077")
        (record,) = catalog.logger.entries
        assert record.entry_id is None
        assert record.message == "umask 077"


class TestLogger:
    """Verify numbering and queries."""

    def test_log_returns_numbered_record(self) -> None:
        """Each record gets the next sequence number."""
        logger = Logger()
        first = logger.log(LogLevel.INFO, "chmod 600 a", source="catalog", entry_id="1")
        second = logger.log(LogLevel.INFO, "chmod 644 a", source="catalog", entry_id="1")
        assert (first.sequence, second.sequence) == (1, 2)
        assert logger.entries == [first, second]

    def test_entries_is_a_copy(self) -> None:
        """Mutating the returned list does not touch the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "umask 022", source="catalog")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_filter_combines_criteria(self) -> None:
        """Level, source and entry filters all apply together."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "Selected a", source="catalog", entry_id="1")
        logger.log(LogLevel.INFO, "chmod 600 a", source="catalog", entry_id="1")
        logger.log(LogLevel.INFO, "chmod 600 b", source="catalog", entry_id="2")
        logger.log(LogLevel.INFO, "request", source="web", entry_id="1")
        matched = logger.filter(min_level=LogLevel.INFO, source="catalog", entry_id="1")
        assert [r.message for r in matched] == ["chmod 600 a"]

    def test_filter_without_criteria_returns_everything(self) -> None:
        """No criteria means every record."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "x", source="catalog")
        assert len(logger.filter()) == 1

    def test_clear_keeps_numbering(self) -> None:
        """After clearing, numbering continues rather than restarting."""
        logger = Logger()
        logger.log(LogLevel.INFO, "one", source="catalog")
        logger.clear()
        assert logger.entries == []
        assert logger.log(LogLevel.INFO, "two", source="catalog").sequence == 2  # noqa: PLR2004


class TestEntryHistory:
    """Verify per-entry change history from the catalog."""

    def test_history_tracks_one_entry(self) -> None:
        """chmod and chown on one entry appear; others do not."""
        catalog = Catalog.with_sample_entries()
        catalog.select("2")
        catalog.set_permissions("2", from_numeric("700"))
        catalog.set_permissions("1", from_numeric("600"))
        catalog.set_ownership("2", "root", "wheel")
        history = catalog.logger.history("2")
        assert [r.message for r in history] == [
            "chmod 700 script.sh",
            "chown root:wheel script.sh",
        ]

    def test_history_starts_with_creation(self) -> None:
        """A created entry's trail begins with its creation."""
        catalog = Catalog(umask="077")
        entry = catalog.create_entry("notes.txt", EntryKind.FILE)
        (record,) = catalog.logger.history(entry.entry_id)
        assert record.message == "Created file notes.txt with mode 600 (umask 077)"


class TestShellLogCommand:
    """Verify the shell's log command."""

    def test_log_shows_changes(self) -> None:
        """log shows every catalog change."""
        shell = Shell(catalog=Catalog.with_sample_entries())
        shell.execute("umask 002")
        shell.execute("chmod 700 script.sh")
        result = shell.execute("log")
        assert "[INFO] catalog: umask 002" in result
        assert "[INFO] catalog: chmod 700 script.sh" in result

    def test_log_name_shows_entry_history(self) -> None:
        """log NAME shows only that entry's changes."""
        shell = Shell(catalog=Catalog.with_sample_entries())
        shell.execute("chmod 700 script.sh")
        shell.execute("chmod 600 document.txt")
        shell.execute("chown carol script.sh")
        lines = shell.execute("log script.sh").splitlines()
        assert lines == [
            "  1 [INFO] catalog: chmod 700 script.sh",
            "  3 [INFO] catalog: chown carol:developers script.sh",
        ]

    def test_log_name_without_changes(self) -> None:
        """An untouched entry has no history."""
        shell = Shell(catalog=Catalog.with_sample_entries())
        assert shell.execute("log logs") == "No changes recorded for logs"

    def test_log_unknown_name(self) -> None:
        """log on a missing name is an error."""
        shell = Shell(catalog=Catalog.with_sample_entries())
        assert shell.execute("log nope").startswith("Error: No such file")
