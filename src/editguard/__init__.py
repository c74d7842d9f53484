"""editguard — pre-edit security reminders for coding agents, once per file per session."""

from editguard.decision import Decision, DecisionEngine, Verdict
from editguard.hook import HookResult, decode_event, run_hook
from editguard.persistence import MemoryWarningStore, SqliteWarningStore, WarningStore, open_store
from editguard.rules import RULE_CATALOG, RuleEngine, load_config
from editguard.schema import HookEvent

__all__ = [
    "RULE_CATALOG",
    "Decision",
    "DecisionEngine",
    "HookEvent",
    "HookResult",
    "MemoryWarningStore",
    "RuleEngine",
    "SqliteWarningStore",
    "Verdict",
    "WarningStore",
    "decode_event",
    "load_config",
    "open_store",
    "run_hook",
]
