"""Interactive REPL (Read-Eval-Print Loop) for the permission simulator.

The REPL builds a catalog from the environment configuration, creates
a shell, and enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The helper functions (``build_prompt``, ``format_banner``) are pure
and testable.  The ``run()`` function is the I/O entrypoint.
"""

import readline

from py_perms.catalog import Catalog, build_catalog
from py_perms.clipboard import Clipboard, system_clipboard_writer
from py_perms.completer import Completer
from py_perms.config import SimulatorConfig
from py_perms.shell import Shell

_BANNER_WIDTH = 38


def format_banner(catalog: Catalog) -> str:
    """Return the welcome banner shown when the REPL starts."""
    border = "=" * _BANNER_WIDTH
    header = (
        f"\n  {border}\n           py-perms v0.1.0\n"
        f"   chmod, chown and umask, simulated\n  {border}\n\n"
    )
    body = f"  {len(catalog.entries)} entries loaded, umask {catalog.umask or '000'}\n"
    footer = "\nType 'help' for commands, 'learn' for lessons, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(catalog: Catalog) -> str:
    """Build the prompt, showing the selected entry if there is one.

    Returns:
        A prompt like ``perms $ `` or ``perms [script.sh] $ ``.

    """
    selected = catalog.selected
    if selected is None:
        return "perms $ "
    return f"perms [{selected.name}] $ "


def run() -> None:
    """Run the interactive REPL until ``exit``, Ctrl+D or Ctrl+C."""
    config = SimulatorConfig.from_env()
    catalog = build_catalog(config)
    clipboard = Clipboard(writer=system_clipboard_writer, reset_after=config.copy_reset_seconds)
    shell = Shell(catalog=catalog, clipboard=clipboard)

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner(catalog))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(catalog))
            except EOFError:
                # Ctrl+D — graceful exit
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        print("Bye.")  # noqa: T201
