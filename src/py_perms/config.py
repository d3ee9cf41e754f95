"""Simulator configuration — startup settings read from the environment.

Like a Unix process, the simulator takes its settings from ``KEY=VALUE``
environment variables.  All of them are optional:

- ``PY_PERMS_UMASK`` — the starting umask (default ``022``).
- ``PY_PERMS_OWNER`` / ``PY_PERMS_GROUP`` — the identity stamped on newly
  created entries (default ``user`` / ``staff``).
- ``PY_PERMS_SEED`` — ``1`` to start with the sample entries, ``0`` for an
  empty catalog (default ``1``).
- ``PY_PERMS_COPY_RESET`` — seconds the "copied" indicator stays lit
  (default ``2``).

Bad values fail at startup instead of surfacing later as odd behaviour.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_perms.catalog import DEFAULT_GROUP, DEFAULT_OWNER
from py_perms.clipboard import DEFAULT_RESET_SECONDS
from py_perms.umask import DEFAULT_UMASK, normalize_umask

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "PY_PERMS_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class SimulatorConfig:
    """Settings for one simulator session."""

    umask: str = DEFAULT_UMASK
    default_owner: str = DEFAULT_OWNER
    default_group: str = DEFAULT_GROUP
    seed_samples: bool = True
    copy_reset_seconds: float = DEFAULT_RESET_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SimulatorConfig:
        """Build a config from ``PY_PERMS_*`` variables.

        Args:
            environ: Variables to read (defaults to ``os.environ``).

        Raises:
            InvalidFormatError: If the umask is not three octal digits.
            ValueError: If a boolean or number cannot be parsed.

        """
        env = os.environ if environ is None else environ
        defaults = cls()

        umask = normalize_umask(env.get(f"{ENV_PREFIX}UMASK", defaults.umask))
        owner = env.get(f"{ENV_PREFIX}OWNER", defaults.default_owner)
        group = env.get(f"{ENV_PREFIX}GROUP", defaults.default_group)
        if not owner or not group:
            msg = "Default owner and group must not be empty"
            raise ValueError(msg)

        seed_raw = env.get(f"{ENV_PREFIX}SEED")
        seed = defaults.seed_samples if seed_raw is None else _parse_bool(seed_raw)

        reset_raw = env.get(f"{ENV_PREFIX}COPY_RESET")
        reset = defaults.copy_reset_seconds if reset_raw is None else float(reset_raw)
        if reset < 0:
            msg = f"{ENV_PREFIX}COPY_RESET must not be negative, got {reset}"
            raise ValueError(msg)

        return cls(
            umask=umask,
            default_owner=owner,
            default_group=group,
            seed_samples=seed,
            copy_reset_seconds=reset,
        )


def _parse_bool(value: str) -> bool:
    """Parse an environment-style boolean."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"Expected a boolean, got {value!r}"
    raise ValueError(msg)
