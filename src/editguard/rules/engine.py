# SPDX-License-Identifier: MIT
"""Rule engine — evaluates the catalog against a single edit context."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from editguard.rules.base import Rule

if TYPE_CHECKING:
    from editguard.rules.context import EditContext

log = logging.getLogger(__name__)


class RuleEngine:
    """Holds an ordered rule set and reports which rules an edit triggers."""

    def __init__(self, rules: Iterable[Rule] | None = None) -> None:
        from editguard.rules.registry import RULE_CATALOG

        self._rules: tuple[Rule, ...] = tuple(RULE_CATALOG if rules is None else rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def find_matches(self, ctx: EditContext) -> list[Rule]:
        """Return every rule whose predicate fires, in catalog order.

        Operations without proposed content never match. A rule whose
        predicate raises is logged and counted as no match.
        """
        if not ctx.is_edit:
            return []
        matched: list[Rule] = []
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                continue
            try:
                hit = rule.matches(ctx)
            except Exception:
                log.exception("Rule %s failed on %s; treating as no match", rule.id, ctx.file_path)
                continue
            if hit:
                seen.add(rule.id)
                matched.append(rule)
        return matched
