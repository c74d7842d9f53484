# SPDX-License-Identifier: MIT
"""Rule catalog — explicit, ordered tuple of every guard rule."""

from __future__ import annotations

from editguard.rules.base import Rule
from editguard.rules.dangerous_sinks import (
    CHILD_PROCESS_RULE,
    EVAL_RULE,
    NEW_FUNCTION_RULE,
    OS_SYSTEM_RULE,
    PICKLE_RULE,
)
from editguard.rules.dom_sinks import (
    DANGEROUSLY_SET_HTML_RULE,
    DOCUMENT_WRITE_RULE,
    INNER_HTML_RULE,
)
from editguard.rules.token_storage import LOCAL_STORAGE_RULE
from editguard.rules.workflow_injection import WORKFLOW_RULE

RULE_CATALOG: tuple[Rule, ...] = (
    WORKFLOW_RULE,
    CHILD_PROCESS_RULE,
    NEW_FUNCTION_RULE,
    EVAL_RULE,
    DANGEROUSLY_SET_HTML_RULE,
    DOCUMENT_WRITE_RULE,
    INNER_HTML_RULE,
    PICKLE_RULE,
    OS_SYSTEM_RULE,
    LOCAL_STORAGE_RULE,
)
