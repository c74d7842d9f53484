# SPDX-License-Identifier: MIT
"""Guard rule engine — literal and path rules that flag risky edits."""

from typing import Any

from editguard.rules.base import PathRule, Rule, SubstringRule
from editguard.rules.config import GuardConfig, load_config
from editguard.rules.context import EditContext, build_context, extract_content
from editguard.rules.engine import RuleEngine
from editguard.rules.registry import RULE_CATALOG

__all__ = [
    "RULE_CATALOG",
    "EditContext",
    "GuardConfig",
    "PathRule",
    "Rule",
    "RuleEngine",
    "SubstringRule",
    "build_context",
    "extract_content",
    "load_config",
]


def find_matches(
    tool_name: str, tool_input: dict[str, Any], rules: tuple[Rule, ...] | None = None
) -> list[Rule]:
    """Convenience: build the edit context and return matching rules."""
    return RuleEngine(rules).find_matches(build_context(tool_name, tool_input))
