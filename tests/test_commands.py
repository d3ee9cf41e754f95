"""Tests for generated command strings.

The five command templates are shown to learners as copyable,
authoritative examples, so they must match shell syntax exactly.
"""

from datetime import UTC, datetime

import pytest

from py_perms.catalog import Catalog, Entry, EntryKind
from py_perms.commands import (
    chmod_numeric,
    chmod_symbolic,
    chown,
    long_listing,
    ls_command,
    preview_commands,
    status_summary,
    umask_command,
)
from py_perms.permissions import from_numeric

EXPECTED_COMMAND_COUNT = 5


def _script() -> Entry:
    """Return the sample script.sh entry."""
    (entry,) = Catalog.with_sample_entries().find("script.sh")
    return entry


class TestTemplates:
    """Verify each template character for character."""

    def test_chmod_numeric(self) -> None:
        """chmod with three digits."""
        assert chmod_numeric(_script()) == "chmod 754 script.sh"

    def test_chmod_symbolic(self) -> None:
        """chmod with u=,g=,o= clauses."""
        assert chmod_symbolic(_script()) == "chmod u=rwx,g=rx,o=r script.sh"

    def test_chmod_symbolic_empty_classes(self) -> None:
        """Classes with nothing set keep their empty assignment."""
        entry = _script()
        entry.permissions = from_numeric("040")
        assert chmod_symbolic(entry) == "chmod u=,g=r,o= script.sh"

    def test_chown(self) -> None:
        """chown owner:group name."""
        assert chown(_script()) == "chown bob:developers script.sh"

    @pytest.mark.parametrize(("umask", "expected"), [("022", "umask 022"), ("", "umask 000")])
    def test_umask(self, umask: str, expected: str) -> None:
        """umask with three digits, empty shown as 000."""
        assert umask_command(umask) == expected

    def test_ls(self) -> None:
        """ls -l name."""
        assert ls_command(_script()) == "ls -l script.sh"


class TestPreview:
    """Verify the ordered preview list."""

    def test_five_commands_in_order(self) -> None:
        """The preview lists all five templates in display order."""
        previews = preview_commands(_script(), "022")
        assert [p.command for p in previews] == [
            "chmod 754 script.sh",
            "chmod u=rwx,g=rx,o=r script.sh",
            "chown bob:developers script.sh",
            "umask 022",
            "ls -l script.sh",
        ]

    def test_previews_have_titles(self) -> None:
        """Every preview has a title and description."""
        previews = preview_commands(_script(), "022")
        assert len(previews) == EXPECTED_COMMAND_COUNT
        assert all(p.title and p.description for p in previews)


class TestLongListing:
    """Verify the ls -l style line."""

    def test_file_line(self) -> None:
        """A file line starts with '-' and shows size and date."""
        assert long_listing(_script()) == "-rwxr-xr-- 1 bob developers 1024 Jan 20 2024 script.sh"

    def test_directory_line(self) -> None:
        """A directory line starts with 'd'."""
        (project,) = Catalog.with_sample_entries().find("project")
        line = long_listing(project)
        assert line.startswith("drwxr-xr-x 2 alice developers 4096 ")
        assert line.endswith(" project")

    def test_missing_time(self) -> None:
        """An entry without a timestamp shows a dash."""
        entry = Entry(
            entry_id="1",
            name="x",
            kind=EntryKind.FILE,
            owner="a",
            group="b",
            permissions=from_numeric("600"),
            size=3,
        )
        assert long_listing(entry) == "-rw------- 1 a b 3 - x"

    def test_uses_timestamp(self) -> None:
        """The date comes from modified_at."""
        entry = _script()
        entry.modified_at = datetime(2023, 12, 5, tzinfo=UTC)
        assert "Dec 05 2023" in long_listing(entry)


class TestStatusSummary:
    """Verify the status block."""

    def test_summary(self) -> None:
        """The block names the entry, its type, owner and permissions."""
        lines = status_summary(_script())
        assert lines[0].endswith("script.sh")
        assert lines[1].endswith("file")
        assert lines[2].endswith("bob:developers")
        assert lines[3].endswith("rwxr-xr-- (754)")
