# SPDX-License-Identifier: MIT
"""PreToolUse hook entry point — reads one edit event, prints reminders, exits.

Usage (Claude Code hook):
    python -m editguard

Exit codes:
    0 — allow the edit (also used for every internal failure)
    2 — block the edit; the reminder text is written to stderr

Environment variables:
    EDITGUARD_ENABLED         — 0/false/no/off disables the guard (default: on)
    EDITGUARD_STATE_DIR       — directory for state.db and editguard.log
                                (default: ~/.claude/editguard)
    EDITGUARD_RETENTION_DAYS  — days a session's warnings are kept (default: 30)
    EDITGUARD_LOG_LEVEL       — logging level for editguard.log (default: WARNING)
    CLAUDE_SESSION_ID         — session id when the payload carries none
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

import navi_sanitize
from pydantic import ValidationError

from editguard.decision import Clock, DecisionEngine, Verdict, utc_now
from editguard.persistence import WarningStore, open_store
from editguard.rules.config import GuardConfig, load_config, resolve_state_dir
from editguard.schema import HookEvent

log = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class HookResult:
    """What the hook process should emit: an exit code and optional stderr text."""

    verdict: Verdict
    stderr: str = ""

    @property
    def exit_code(self) -> int:
        return int(self.verdict)


ALLOWED = HookResult(verdict=Verdict.ALLOW)


def configure_logging(config: GuardConfig) -> None:
    """Send editguard logs to <state_dir>/editguard.log.

    stderr belongs to the block message, so nothing is logged there. If the
    state directory is unusable, logs are dropped.
    """
    logger = logging.getLogger("editguard")
    logger.setLevel(config.log_level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    handler: logging.Handler
    try:
        config.state_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(config.log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    except OSError:
        handler = logging.NullHandler()
    logger.addHandler(handler)


def decode_event(raw: str) -> HookEvent | None:
    """Parse the stdin payload. Returns None for empty or malformed input."""
    if not raw.strip():
        return None
    try:
        return HookEvent.model_validate_json(raw)
    except ValidationError as exc:
        log.warning("Ignoring malformed hook payload (%d error(s))", exc.error_count())
        return None


def resolve_session_id(event: HookEvent) -> str:
    """Session id from the payload, then CLAUDE_SESSION_ID, then a fixed default."""
    return event.session_id or os.environ.get("CLAUDE_SESSION_ID") or DEFAULT_SESSION_ID


def _display_path(path: str) -> str:
    """Clean a file path before echoing it back (invisible chars, bidi, homoglyphs)."""
    return navi_sanitize.clean(path).replace("\n", " ").replace("\r", " ")


def run_hook(
    raw: str,
    *,
    config: GuardConfig,
    store: WarningStore | None = None,
    clock: Clock | None = None,
) -> HookResult:
    """Decide one hook invocation. Never raises.

    Edit payloads without a target file_path are treated as malformed and
    allowed without touching state.

    When ``store`` is None the durable store under ``config.state_dir`` is
    opened and closed around the decision.
    """
    if not config.enabled:
        return ALLOWED
    try:
        event = decode_event(raw)
    except Exception:
        log.exception("Hook payload could not be decoded; allowing")
        return ALLOWED
    if event is None:
        return ALLOWED
    ctx = event.to_context()
    if ctx.is_edit and not ctx.file_path:
        log.warning("Ignoring %s payload without a file_path", event.tool_name)
        return ALLOWED

    owns_store = store is None
    try:
        active_store = store if store is not None else open_store(config.db_path)
        try:
            engine = DecisionEngine(
                active_store,
                clock=clock,
                enabled=config.enabled,
                retention=config.retention,
            )
            decision = engine.decide(resolve_session_id(event), ctx)
        finally:
            if owns_store:
                active_store.close()
        if not decision.blocked:
            return ALLOWED
        return HookResult(
            verdict=Verdict.BLOCK,
            stderr=decision.message(_display_path(decision.file_path)),
        )
    except Exception:
        log.exception("Guard failed on %s; allowing", event.tool_name)
        return ALLOWED


def run_prune(config: GuardConfig, *, clock: Clock | None = None) -> int:
    """Run one pruning pass on the durable store; return sessions removed."""
    store = open_store(config.db_path)
    try:
        return store.prune((clock or utc_now)(), config.retention)
    finally:
        store.close()


def main(*, state_dir: str | None = None, prune_only: bool = False) -> None:
    """Hook process entry point — reads stdin, writes stderr, exits 0 or 2."""
    try:
        config = load_config(cli_state_dir=state_dir)
    except ValueError as exc:
        configure_logging(GuardConfig(state_dir=resolve_state_dir(state_dir)))
        log.error("Invalid configuration, guard disabled: %s", exc)
        sys.exit(0)
    configure_logging(config)
    for problem in config.problems:
        log.warning("Using default for invalid setting: %s", problem)

    if prune_only:
        try:
            removed = run_prune(config)
            log.info("Pruned %d expired session(s)", removed)
        except Exception:
            log.exception("Prune pass failed")
        sys.exit(0)

    try:
        raw = sys.stdin.read()
    except (OSError, UnicodeDecodeError):
        log.exception("Could not read hook payload")
        sys.exit(0)

    result = run_hook(raw, config=config)
    if result.stderr:
        sys.stderr.write(result.stderr)
        sys.stderr.flush()
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
