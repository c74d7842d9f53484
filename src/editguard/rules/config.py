# SPDX-License-Identifier: MIT
"""Guard configuration — global switch, state location, retention, log level."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30
DEFAULT_STATE_DIR = Path("~/.claude/editguard")

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class GuardConfig:
    """Resolved guard settings for one invocation."""

    enabled: bool = True
    state_dir: Path = DEFAULT_STATE_DIR
    retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS)
    log_level: int = logging.WARNING
    # Settings that were rejected and replaced by their default
    problems: tuple[str, ...] = ()

    @property
    def db_path(self) -> Path:
        return self.state_dir / "state.db"

    @property
    def log_path(self) -> Path:
        return self.state_dir / "editguard.log"


def _parse_enabled(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _FALSE_VALUES:
        return False
    if value in _TRUE_VALUES or value == "":
        return True
    msg = f"Unrecognized EDITGUARD_ENABLED value: {raw!r}. Use one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}"
    raise ValueError(msg)


def _parse_retention(raw: str) -> timedelta:
    try:
        days = int(raw)
    except ValueError:
        msg = f"EDITGUARD_RETENTION_DAYS must be an integer, got {raw!r}"
        raise ValueError(msg) from None
    if days <= 0:
        msg = f"EDITGUARD_RETENTION_DAYS must be positive, got {days}"
        raise ValueError(msg)
    return timedelta(days=days)


def _parse_log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        msg = f"Unknown log level: {raw!r}"
        raise ValueError(msg)
    return level


def load_config(cli_state_dir: str | None = None) -> GuardConfig:
    """Load guard config with CLI > env > default priority.

    A bad retention or log level falls back to its default and is listed in
    ``problems``; only the global switch is strict.

    Args:
        cli_state_dir: State directory from the CLI --state-dir flag (highest priority).

    Returns:
        GuardConfig with every field resolved.

    Raises:
        ValueError: If EDITGUARD_ENABLED is not recognized.
    """
    enabled = _parse_enabled(os.environ.get("EDITGUARD_ENABLED", "1"))
    problems: list[str] = []

    retention = timedelta(days=DEFAULT_RETENTION_DAYS)
    raw_retention = os.environ.get("EDITGUARD_RETENTION_DAYS")
    if raw_retention is not None:
        try:
            retention = _parse_retention(raw_retention)
        except ValueError as exc:
            problems.append(str(exc))

    log_level = logging.WARNING
    raw_level = os.environ.get("EDITGUARD_LOG_LEVEL")
    if raw_level is not None:
        try:
            log_level = _parse_log_level(raw_level)
        except ValueError as exc:
            problems.append(str(exc))

    return GuardConfig(
        enabled=enabled,
        state_dir=resolve_state_dir(cli_state_dir),
        retention=retention,
        log_level=log_level,
        problems=tuple(problems),
    )


def resolve_state_dir(cli_state_dir: str | None = None) -> Path:
    """State directory with CLI > env > default priority, ``~`` expanded."""
    state_dir_str = cli_state_dir or os.environ.get("EDITGUARD_STATE_DIR") or str(DEFAULT_STATE_DIR)
    return Path(state_dir_str).expanduser()
