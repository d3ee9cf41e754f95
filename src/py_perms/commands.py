"""Command generation — the shell commands that reproduce what you see.

Whatever state an entry is in, there is a real command that would put a
real file into the same state.  This module writes those commands out,
ready to paste into a terminal:

    chmod 754 script.sh
    chmod u=rwx,g=rx,o= script.sh
    chown bob:developers script.sh
    umask 022
    ls -l script.sh

The strings are built from the same codec the rest of the simulator
uses, so they always agree with the symbolic and numeric views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_perms.permissions import to_chmod_symbolic_argument, to_numeric, to_symbolic
from py_perms.umask import normalize_umask

if TYPE_CHECKING:
    from py_perms.catalog import Entry

# ls -l shows a fixed block size for directories.
_DIRECTORY_SIZE = 4096


@dataclass(frozen=True)
class CommandPreview:
    """A generated command with a short label and explanation."""

    title: str
    command: str
    description: str


def chmod_numeric(entry: Entry) -> str:
    """Return ``chmod <numeric> <name>``."""
    return f"chmod {to_numeric(entry.permissions)} {entry.name}"


def chmod_symbolic(entry: Entry) -> str:
    """Return ``chmod u=...,g=...,o=... <name>``."""
    return f"chmod {to_chmod_symbolic_argument(entry.permissions)} {entry.name}"


def chown(entry: Entry) -> str:
    """Return ``chown <owner>:<group> <name>``."""
    return f"chown {entry.owner}:{entry.group} {entry.name}"


def umask_command(umask: str) -> str:
    """Return ``umask <value>``; an empty umask is written as ``000``."""
    return f"umask {normalize_umask(umask)}"


def ls_command(entry: Entry) -> str:
    """Return ``ls -l <name>``."""
    return f"ls -l {entry.name}"


def preview_commands(entry: Entry, umask: str) -> list[CommandPreview]:
    """Return the five commands for *entry*, in display order."""
    return [
        CommandPreview(
            "Set permissions (numeric)",
            chmod_numeric(entry),
            "Change permissions using octal notation",
        ),
        CommandPreview(
            "Set permissions (symbolic)",
            chmod_symbolic(entry),
            "Change permissions using symbolic notation",
        ),
        CommandPreview("Change ownership", chown(entry), "Change file owner and group"),
        CommandPreview("Set umask", umask_command(umask), "Set default permissions for new files"),
        CommandPreview("View permissions", ls_command(entry), "Display detailed file information"),
    ]


def long_listing(entry: Entry) -> str:
    """Format *entry* the way ``ls -l`` prints a line.

    Example::

        -rwxr-xr-- 1 bob developers 1024 Jan 20 2024 script.sh

    """
    type_char = "d" if entry.is_directory else "-"
    links = 2 if entry.is_directory else 1
    size = _DIRECTORY_SIZE if entry.size is None else entry.size
    when = entry.modified_at.strftime("%b %d %Y") if entry.modified_at else "-"
    return (
        f"{type_char}{to_symbolic(entry.permissions)} {links} "
        f"{entry.owner} {entry.group} {size} {when} {entry.name}"
    )


def status_summary(entry: Entry) -> list[str]:
    """Return the name/type/owner/permissions block for *entry*."""
    return [
        f"Name:        {entry.name}",
        f"Type:        {entry.kind}",
        f"Owner:       {entry.owner}:{entry.group}",
        f"Permissions: {to_symbolic(entry.permissions)} ({to_numeric(entry.permissions)})",
    ]
