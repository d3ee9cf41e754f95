"""py-perms — a simulator for Unix permissions, ownership and umask.

Re-exports the engine so callers can write::

    from py_perms import Catalog, compute_default, from_numeric, to_symbolic
"""

from py_perms.catalog import Catalog, Entry, EntryKind, NotFoundError, build_catalog
from py_perms.clipboard import Clipboard, ClipboardError
from py_perms.commands import CommandPreview, preview_commands
from py_perms.config import SimulatorConfig
from py_perms.permissions import (
    ClassName,
    InvalidFormatError,
    Permission,
    PermissionClass,
    PermissionSet,
    apply_symbolic_mode,
    from_mode,
    from_numeric,
    from_symbolic,
    to_chmod_symbolic_argument,
    to_mode,
    to_numeric,
    to_symbolic,
)
from py_perms.umask import compute_default, is_valid_umask

__all__ = [
    "Catalog",
    "ClassName",
    "Clipboard",
    "ClipboardError",
    "CommandPreview",
    "Entry",
    "EntryKind",
    "InvalidFormatError",
    "NotFoundError",
    "Permission",
    "PermissionClass",
    "PermissionSet",
    "SimulatorConfig",
    "apply_symbolic_mode",
    "build_catalog",
    "compute_default",
    "from_mode",
    "from_numeric",
    "from_symbolic",
    "is_valid_umask",
    "preview_commands",
    "to_chmod_symbolic_argument",
    "to_mode",
    "to_numeric",
    "to_symbolic",
]
