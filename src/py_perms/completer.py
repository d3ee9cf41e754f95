"""Context-aware tab completer for the py-perms shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the words
typed so far and returns a list of candidate strings.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from py_perms.catalog import COMMON_GROUPS, COMMON_OWNERS
from py_perms.umask import COMMON_UMASKS

if TYPE_CHECKING:
    from py_perms.shell import Shell

# Commands whose last argument names an entry.
_ENTRY_COMMANDS: frozenset[str] = frozenset(
    ["ls", "stat", "select", "chmod", "chown", "preview", "log"]
)

_NUMERIC_MODES: list[str] = ["600", "644", "664", "700", "750", "755", "775", "777"]


class Completer:
    """Context-aware tab completer for the py-perms shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*."""
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return self._matching(self._shell.command_names, text)

        cmd = words[0]
        # Index of the word being completed (0 = command itself).
        position = len(words) if line.endswith(" ") else len(words) - 1

        if cmd == "umask" and position == 1:
            return self._matching([p.value for p in COMMON_UMASKS], text)
        if cmd == "learn" and position == 1:
            return self._matching([*self._shell.tutorial_names, "all"], text)
        if cmd == "chmod" and position == 1:
            return self._matching(_NUMERIC_MODES, text)
        if cmd == "chown" and position == 1:
            return self._ownership(text)
        if cmd in _ENTRY_COMMANDS:
            return self._matching(self._entry_names(), text)
        return []

    def _ownership(self, text: str) -> list[str]:
        """Complete ``OWNER`` or, after a colon, ``OWNER:GROUP``."""
        owner, colon, group = text.partition(":")
        if not colon:
            return self._matching(list(COMMON_OWNERS), text)
        return [f"{owner}:{g}" for g in self._matching(list(COMMON_GROUPS), group)]

    def _entry_names(self) -> list[str]:
        return sorted({e.name for e in self._shell.catalog.entries})

    @staticmethod
    def _matching(candidates: list[str], text: str) -> list[str]:
        return sorted(c for c in candidates if c.startswith(text))
