"""Guided lessons on Unix permissions.

Each lesson is a short walkthrough that performs **real catalog
operations** on a private scratch catalog and narrates what happened.
The learner's own catalog is never touched.

Lessons are written for someone who has used a terminal but never
looked closely at ``rwxr-xr-x``.  Each one:

1. Opens with a **real-world analogy** (keys, guest lists, cookie cutters…).
2. Walks through **numbered steps** using the actual engine.
3. Ends with a **summary** and a pointer to the next lesson.
"""

from __future__ import annotations

from collections.abc import Callable

from py_perms.catalog import Catalog, EntryKind
from py_perms.commands import chmod_numeric, chmod_symbolic, chown, long_listing
from py_perms.permissions import (
    ClassName,
    InvalidFormatError,
    apply_symbolic_mode,
    from_numeric,
    to_numeric,
    to_symbolic,
)
from py_perms.umask import COMMON_UMASKS, compute_default

_LESSON_ORDER: list[str] = [
    "symbolic",
    "numeric",
    "chmod",
    "chown",
    "umask",
]


class TutorialRunner:
    """Run lessons that teach permissions with the real engine."""

    def __init__(self) -> None:
        """Create a runner with the built-in lessons."""
        self._lessons: dict[str, str] = {
            "symbolic": "Symbolic — reading rwxr-xr-x",
            "numeric": "Numeric — why 755 means rwxr-xr-x",
            "chmod": "chmod — changing who may do what",
            "chown": "chown — changing who owns a file",
            "umask": "umask — the defaults for new files",
        }

    def list_lessons(self) -> list[str]:
        """Return sorted list of available lesson names."""
        return sorted(self._lessons)

    def describe(self, name: str) -> str:
        """Return the one-line title of a lesson.

        Raises:
            KeyError: If the lesson name is not recognised.

        """
        return self._lessons[name]

    def run(self, name: str) -> str:
        """Run a lesson by name and return its formatted output.

        Raises:
            KeyError: If the lesson name is not recognised.

        """
        runners: dict[str, Callable[[Catalog], str]] = {
            "symbolic": self._lesson_symbolic,
            "numeric": self._lesson_numeric,
            "chmod": self._lesson_chmod,
            "chown": self._lesson_chown,
            "umask": self._lesson_umask,
        }
        runner = runners.get(name)
        if runner is None:
            msg = f"Unknown lesson: {name}"
            raise KeyError(msg)
        return runner(Catalog.with_sample_entries())

    def run_all(self) -> str:
        """Run all lessons in order and return combined output."""
        parts: list[str] = []
        for name in _LESSON_ORDER:
            parts.append(self.run(name))
            parts.append("")
        return "\n".join(parts)

    # -- Individual lessons ---------------------------------------------------

    def _lesson_symbolic(self, catalog: Catalog) -> str:
        """Teach how to read the nine-character permission string."""
        lines: list[str] = [
            "=== Lesson: Symbolic permissions ===",
            "",
            "Think of a file as a room with three guest lists: one for the owner,",
            "one for the owner's team (the group), and one for everybody else.",
            "Each list says whether that guest may look (r), change (w), or run (x).",
            "",
        ]

        lines.append("Step 1: Look at a real listing")
        (script,) = catalog.find("script.sh")
        lines.append(f"  {long_listing(script)}")
        lines.append("")

        lines.append("Step 2: Split the nine characters into three groups")
        symbolic = to_symbolic(script.permissions)
        for name, flags in script.permissions.classes():
            lines.append(f"  {name:<6} {flags.symbolic}  ->  {_explain(flags.letters)}")
        lines.append(f"  Together: {symbolic}")
        lines.append("")

        lines.extend(
            [
                "Summary: the first character says file (-) or directory (d); the next",
                "nine are always owner, group, other, each written as r, w, x or -.",
                "",
                "Next up: 'numeric' — the same nine bits as three digits.",
            ]
        )
        return "\n".join(lines)

    def _lesson_numeric(self, catalog: Catalog) -> str:
        """Teach the 4/2/1 digit encoding."""
        lines: list[str] = [
            "=== Lesson: Numeric permissions ===",
            "",
            "Each permission is a coin: read is worth 4, write 2, execute 1.",
            "Add up the coins in each class and you get one digit from 0 to 7.",
            "",
        ]

        lines.append("Step 1: Add up the coins for each class")
        (project,) = catalog.find("project")
        for name, flags in project.permissions.classes():
            coins = (
                f"{4 if flags.read else 0} + {2 if flags.write else 0} + "
                f"{1 if flags.execute else 0}"
            )
            lines.append(f"  {name:<6} {flags.symbolic} = {coins} = {flags.digit}")
        perms = project.permissions
        lines.append(f"  So {to_symbolic(perms)} is {to_numeric(perms)}.")
        lines.append("")

        lines.append("Step 2: Go the other way")
        for mode in ("644", "600", "777"):
            lines.append(f"  {mode} -> {to_symbolic(from_numeric(mode))}")
        lines.append("")

        lines.append("Step 3: Digits above 7 do not exist")
        try:
            from_numeric("758")
        except InvalidFormatError as e:
            lines.append(f"  from_numeric('758') fails: {e}")
        lines.append("")

        lines.extend(
            [
                "Summary: three digits, one per class, each the sum of 4, 2 and 1.",
                "",
                "Next up: 'chmod' — changing permissions.",
            ]
        )
        return "\n".join(lines)

    def _lesson_chmod(self, catalog: Catalog) -> str:
        """Teach numeric and symbolic chmod."""
        lines: list[str] = [
            "=== Lesson: chmod ===",
            "",
            "chmod rewrites the guest lists.  You can hand over a complete new set",
            "of lists (numeric mode) or just tweak one entry (symbolic mode).",
            "",
        ]

        (document,) = catalog.find("document.txt")
        lines.append("Step 1: Start from a plain text file")
        lines.append(f"  {long_listing(document)}")
        lines.append("")

        lines.append("Step 2: Make it private with a numeric mode")
        catalog.set_permissions(document.entry_id, from_numeric("600"))
        lines.append(f"  $ {chmod_numeric(document)}")
        lines.append(f"  {long_listing(document)}")
        lines.append("")

        lines.append("Step 3: Let the group read it again, symbolically")
        catalog.set_permissions(
            document.entry_id, apply_symbolic_mode(document.permissions, "g+r")
        )
        lines.append("  $ chmod g+r document.txt")
        lines.append(f"  {long_listing(document)}")
        lines.append(f"  The full symbolic form would be: {chmod_symbolic(document)}")
        lines.append("")

        lines.extend(
            [
                "Summary: numeric chmod replaces every bit; symbolic chmod (u+x, go-w, a=r)",
                "adds, removes or sets bits for the classes you name.",
                "",
                "Next up: 'chown' — changing who owns a file.",
            ]
        )
        return "\n".join(lines)

    def _lesson_chown(self, catalog: Catalog) -> str:
        """Teach ownership changes."""
        lines: list[str] = [
            "=== Lesson: chown ===",
            "",
            "Permissions say what the owner may do; chown says who the owner is.",
            "It is like handing the keys of the room to a different person.",
            "",
        ]

        (config,) = catalog.find("config.json")
        lines.append("Step 1: A file owned by root")
        lines.append(f"  {long_listing(config)}")
        lines.append("")

        lines.append("Step 2: Give it to alice and the developers group")
        catalog.set_ownership(config.entry_id, "alice", "developers")
        lines.append(f"  $ {chown(config)}")
        lines.append(f"  {long_listing(config)}")
        owner_flags = config.permissions.get(ClassName.OWNER)
        lines.append(f"  alice now gets the owner's rights: {_explain(owner_flags.letters)}.")
        lines.append("")

        lines.extend(
            [
                "Summary: chown OWNER:GROUP NAME moves the file to new owners; the",
                "permission bits stay exactly as they were.  On a real system only",
                "root may give files away.",
                "",
                "Next up: 'umask' — the defaults for new files.",
            ]
        )
        return "\n".join(lines)

    def _lesson_umask(self, catalog: Catalog) -> str:
        """Teach how umask shapes new files and directories."""
        lines: list[str] = [
            "=== Lesson: umask ===",
            "",
            "A umask is a cookie cutter held over every new file: new files start",
            "as 666 and new directories as 777, and the umask cuts bits away.",
            "",
        ]

        lines.append("Step 1: Compare the common umask values")
        for preset in COMMON_UMASKS:
            file_perms = compute_default(preset.value, is_container=False)
            dir_perms = compute_default(preset.value, is_container=True)
            lines.append(
                f"  umask {preset.value}: files {to_numeric(file_perms)}, "
                f"directories {to_numeric(dir_perms)}  ({preset.description})"
            )
        lines.append("")

        lines.append("Step 2: Create files under a private umask")
        catalog.set_umask("077")
        lines.append("  $ umask 077")
        note = catalog.create_entry("notes.txt", EntryKind.FILE)
        lines.append(f"  $ touch notes.txt  ->  {long_listing(note)}")
        vault = catalog.create_entry("vault", EntryKind.DIRECTORY)
        lines.append(f"  $ mkdir vault      ->  {long_listing(vault)}")
        lines.append("")

        lines.extend(
            [
                "Summary: umask removes bits; it never adds them.  Files never get",
                "execute by default, whatever the umask says.",
                "",
                "That's the last lesson. Try 'chmod', 'chown' and 'umask' yourself!",
            ]
        )
        return "\n".join(lines)


def _explain(letters: str) -> str:
    """Turn ``rx`` into ``read, execute`` (or ``nothing``)."""
    words = {"r": "read", "w": "write", "x": "execute"}
    return ", ".join(words[c] for c in letters) or "nothing"
