"""The shell — a tiny command interpreter over the catalog.

The shell understands just enough of a Unix shell to practise
permissions: ``ls``, ``chmod``, ``chown``, ``umask``, ``touch`` and
``mkdir``, plus a few helpers for the simulator itself (``select``,
``preview``, ``copy``, ``learn``, ``log``).

Entries are named by filename.  Because two entries may share a name,
any entry can also be named by id with a ``#`` prefix (``#3``).

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable and leaves display to the caller (REPL or web).
    - **Command dispatch via a dict.**  Adding a command means writing
      one method and adding one dict entry.
    - **Errors become output.**  Domain exceptions raised by the
      catalog or codec are turned into ``Error: ...`` strings at the
      command boundary; nothing is swallowed silently.
"""

from collections.abc import Callable
from typing import TypeAlias

from py_perms.catalog import (
    COMMON_GROUPS,
    COMMON_OWNERS,
    Catalog,
    Entry,
    EntryKind,
    NotFoundError,
)
from py_perms.clipboard import Clipboard, ClipboardError
from py_perms.commands import long_listing, preview_commands, status_summary, umask_command
from py_perms.permissions import apply_symbolic_mode, from_numeric
from py_perms.tutorials import TutorialRunner
from py_perms.umask import COMMON_UMASKS, preview

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_NUMERIC_MODE_CHARS = frozenset("01234567")

# chmod and chown both take a mode/owner followed by a target.
_MIN_CHANGE_ARGS = 2


class Shell:
    """Command interpreter bound to one catalog session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, catalog: Catalog, clipboard: Clipboard | None = None) -> None:
        """Create a shell attached to a catalog.

        Args:
            catalog: The session to operate on.
            clipboard: Target for the ``copy`` command.

        """
        self._catalog = catalog
        self._clipboard = clipboard or Clipboard()
        self._tutorials = TutorialRunner()
        self._history: list[str] = []

        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "ls": self._cmd_ls,
            "stat": self._cmd_stat,
            "select": self._cmd_select,
            "chmod": self._cmd_chmod,
            "chown": self._cmd_chown,
            "umask": self._cmd_umask,
            "touch": self._cmd_touch,
            "mkdir": self._cmd_mkdir,
            "preview": self._cmd_preview,
            "copy": self._cmd_copy,
            "learn": self._cmd_learn,
            "log": self._cmd_log,
            "history": self._cmd_history,
            "exit": self._cmd_exit,
        }

    @property
    def catalog(self) -> Catalog:
        """Return the catalog this shell operates on."""
        return self._catalog

    @property
    def clipboard(self) -> Clipboard:
        """Return the clipboard used by ``copy``."""
        return self._clipboard

    @property
    def command_names(self) -> list[str]:
        """Return the sorted list of built-in command names."""
        return sorted(self._commands)

    @property
    def tutorial_names(self) -> list[str]:
        """Return the lessons available through ``learn``."""
        return self._tutorials.list_lessons()

    def execute(self, command: str) -> str:
        """Parse and execute a single command line.

        Args:
            command: The raw command string (e.g. ``"chmod 755 script.sh"``).

        Returns:
            The command output, or an ``Error:`` message.

        """
        stripped = command.strip()
        if not stripped:
            return ""
        self._history.append(stripped)

        name, *args = stripped.split()
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"
        try:
            return handler(args)
        except (NotFoundError, ValueError, ClipboardError) as e:
            return f"Error: {e}"

    # -- helpers ---------------------------------------------------------------

    def _resolve(self, target: str) -> Entry:
        """Find the entry named by *target* (a filename or ``#id``).

        Raises:
            NotFoundError: If nothing matches.
            ValueError: If the name matches more than one entry.

        """
        if target.startswith("#"):
            return self._catalog.get(target[1:])
        matches = self._catalog.find(target)
        if not matches:
            msg = f"No such file or directory: {target}"
            raise NotFoundError(msg)
        if len(matches) > 1:
            ids = ", ".join(f"#{e.entry_id}" for e in matches)
            msg = f"'{target}' is ambiguous; use one of {ids}"
            raise ValueError(msg)
        return matches[0]

    def _target_or_selected(self, args: list[str]) -> Entry:
        """Resolve the first argument, falling back to the selection."""
        if args:
            return self._resolve(args[0])
        selected = self._catalog.selected
        if selected is None:
            msg = "no file selected (use 'select NAME')"
            raise ValueError(msg)
        return selected

    # -- commands --------------------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.command_names)

    def _cmd_ls(self, args: list[str]) -> str:
        """List entries; ``-l`` gives the long format."""
        long_format = "-l" in args
        names = [a for a in args if a != "-l"]
        entries = [self._resolve(n) for n in names] if names else self._catalog.entries
        if long_format:
            return "\n".join(long_listing(e) for e in entries)
        return "\n".join(f"{e.name}/" if e.is_directory else e.name for e in entries)

    def _cmd_stat(self, args: list[str]) -> str:
        """Show the status block for one entry."""
        entry = self._target_or_selected(args)
        return "\n".join([f"Id:          #{entry.entry_id}", *status_summary(entry)])

    def _cmd_select(self, args: list[str]) -> str:
        """Select an entry for ``preview``, ``copy`` and friends."""
        if not args:
            return "Usage: select NAME"
        entry = self._resolve(args[0])
        self._catalog.select(entry.entry_id)
        return f"Selected {entry.name}"

    def _cmd_chmod(self, args: list[str]) -> str:
        """Change permissions: ``chmod 755 NAME`` or ``chmod u+x,go-w NAME``."""
        if len(args) < _MIN_CHANGE_ARGS:
            return "Usage: chmod MODE NAME"
        mode, target = args[0], args[1]
        entry = self._resolve(target)
        if set(mode) <= _NUMERIC_MODE_CHARS:
            permissions = from_numeric(mode)
        else:
            permissions = apply_symbolic_mode(entry.permissions, mode)
        self._catalog.set_permissions(entry.entry_id, permissions)
        return long_listing(entry)

    def _cmd_chown(self, args: list[str]) -> str:
        """Change ownership: ``chown OWNER[:GROUP] NAME``."""
        if len(args) < _MIN_CHANGE_ARGS:
            return "\n".join(
                [
                    "Usage: chown OWNER[:GROUP] NAME",
                    f"Common owners: {', '.join(COMMON_OWNERS)}",
                    f"Common groups: {', '.join(COMMON_GROUPS)}",
                ]
            )
        spec, target = args[0], args[1]
        entry = self._resolve(target)
        owner, _, group = spec.partition(":")
        self._catalog.set_ownership(entry.entry_id, owner or entry.owner, group or entry.group)
        return long_listing(entry)

    def _cmd_umask(self, args: list[str]) -> str:
        """Show the umask, or set a new one: ``umask 027``."""
        if args:
            self._catalog.set_umask(args[0])
        current = self._catalog.umask
        lines = [umask_command(current), *preview(current).lines()]
        if not args:
            presets = ", ".join(f"{p.value} ({p.description})" for p in COMMON_UMASKS)
            lines.append(f"Common values: {presets}")
        return "\n".join(lines)

    def _cmd_touch(self, args: list[str]) -> str:
        """Create a regular file using the current umask."""
        return self._create(args, EntryKind.FILE)

    def _cmd_mkdir(self, args: list[str]) -> str:
        """Create a directory using the current umask."""
        return self._create(args, EntryKind.DIRECTORY)

    def _create(self, args: list[str], kind: EntryKind) -> str:
        if not args:
            return f"Usage: {'mkdir' if kind.is_container else 'touch'} NAME"
        entry = self._catalog.create_entry(args[0], kind)
        return long_listing(entry)

    def _cmd_preview(self, args: list[str]) -> str:
        """Show the numbered commands that reproduce an entry's state."""
        entry = self._target_or_selected(args)
        previews = preview_commands(entry, self._catalog.umask)
        lines: list[str] = []
        for number, item in enumerate(previews, start=1):
            marker = " (copied)" if self._clipboard.is_copied(item.command) else ""
            lines.append(f"{number}. {item.title}{marker}")
            lines.append(f"   $ {item.command}")
        return "\n".join(lines)

    def _cmd_copy(self, args: list[str]) -> str:
        """Copy the Nth preview command: ``copy N [NAME]``."""
        if not args or not args[0].isdigit():
            return "Usage: copy N [NAME]"
        entry = self._target_or_selected(args[1:])
        previews = preview_commands(entry, self._catalog.umask)
        index = int(args[0])
        if not 1 <= index <= len(previews):
            msg = f"command number must be 1-{len(previews)}"
            raise ValueError(msg)
        command = previews[index - 1].command
        self._clipboard.copy(command)
        return f"Copied: {command}"

    def _cmd_learn(self, args: list[str]) -> str:
        """Run a tutorial lesson, or list them."""
        if not args:
            return "Lessons: " + ", ".join(self._tutorials.list_lessons())
        if args[0] == "all":
            return self._tutorials.run_all()
        try:
            return self._tutorials.run(args[0])
        except KeyError:
            return f"Error: unknown lesson '{args[0]}'"

    def _cmd_log(self, args: list[str]) -> str:
        """Show the audit log, or one entry's change history: ``log [NAME]``."""
        logger = self._catalog.logger
        if not args:
            return "\n".join(str(e) for e in logger.entries)
        entry = self._resolve(args[0])
        records = logger.history(entry.entry_id)
        if not records:
            return f"No changes recorded for {entry.name}"
        return "\n".join(str(e) for e in records)

    def _cmd_history(self, _args: list[str]) -> str:
        """Show previously entered commands."""
        return "\n".join(f"  {i}  {cmd}" for i, cmd in enumerate(self._history, start=1))

    def _cmd_exit(self, _args: list[str]) -> str:
        """Leave the shell."""
        return self.EXIT_SENTINEL
