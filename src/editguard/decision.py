# SPDX-License-Identifier: MIT
"""Decision engine — turns rule matches plus session state into a verdict.

Per (rule, file path) within a session there are two states, unwarned and
warned. The first match moves the pair to warned and blocks the edit with
the rule's reminder; later matches of the same pair are treated as
acknowledged and allowed silently. A different path is a different pair.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import IntEnum

from editguard.persistence import DEFAULT_RETENTION, WarningStore
from editguard.rules.base import Rule
from editguard.rules.context import EditContext
from editguard.rules.engine import RuleEngine

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class Verdict(IntEnum):
    """Guard verdicts; values are the hook exit codes."""

    ALLOW = 0
    BLOCK = 2


@dataclass(frozen=True)
class Decision:
    """Outcome of one guard invocation."""

    verdict: Verdict
    file_path: str = ""
    new_rules: list[Rule] = field(default_factory=list)
    already_rules: list[Rule] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return self.verdict is Verdict.BLOCK

    def message(self, display_path: str | None = None) -> str:
        """Compose the reminders of newly warned rules, in catalog order."""
        if not self.new_rules:
            return ""
        path = self.file_path if display_path is None else display_path
        header = f"Security reminder for {path}:" if path else "Security reminder:"
        sections = [f"[{rule.id}]\n{rule.reminder.rstrip()}" for rule in self.new_rules]
        return header + "\n\n" + "\n\n".join(sections) + "\n"


ALLOW = Decision(verdict=Verdict.ALLOW)


class DecisionEngine:
    """Combines the rule engine, the warning store and the global switch."""

    def __init__(
        self,
        store: WarningStore,
        *,
        rule_engine: RuleEngine | None = None,
        clock: Clock | None = None,
        enabled: bool = True,
        retention: timedelta = DEFAULT_RETENTION,
    ) -> None:
        self._store = store
        self._rule_engine = rule_engine or RuleEngine()
        self._clock = clock or utc_now
        self._enabled = enabled
        self._retention = retention

    def decide(self, session_id: str, ctx: EditContext) -> Decision:
        """Return the verdict for one edit and record any new warnings."""
        if not self._enabled:
            return ALLOW

        matches = self._rule_engine.find_matches(ctx)
        if not matches:
            return ALLOW

        now = self._clock()
        self._prune(now)

        new: list[Rule] = []
        already: list[Rule] = []
        for rule in matches:
            if self._has_been_warned(session_id, rule, ctx.file_path):
                already.append(rule)
            elif self._record(session_id, rule, ctx.file_path, now):
                new.append(rule)
            else:
                # Another invocation recorded this pair first
                already.append(rule)

        if new:
            log.info(
                "Blocking %s %s: %s",
                ctx.tool_name,
                ctx.file_path,
                ", ".join(r.id for r in new),
            )
            verdict = Verdict.BLOCK
        else:
            verdict = Verdict.ALLOW
        return Decision(
            verdict=verdict,
            file_path=ctx.file_path,
            new_rules=new,
            already_rules=already,
        )

    # --- Store access, fail open ---

    def _prune(self, now: datetime) -> None:
        try:
            removed = self._store.prune(now, self._retention)
        except Exception:
            log.warning("Pruning session state failed", exc_info=True)
            return
        if removed:
            log.debug("Pruned %d expired session(s)", removed)

    def _has_been_warned(self, session_id: str, rule: Rule, file_path: str) -> bool:
        try:
            return self._store.has_been_warned(session_id, rule.id, file_path)
        except Exception:
            log.warning("Warning lookup failed for %s; treating as unwarned", rule.id, exc_info=True)
            return False

    def _record(self, session_id: str, rule: Rule, file_path: str, now: datetime) -> bool:
        try:
            return self._store.record_warning(session_id, rule.id, file_path, now)
        except Exception:
            log.warning("Recording warning for %s failed", rule.id, exc_info=True)
            return True
