# SPDX-License-Identifier: MIT
"""Tests for editguard.decision — verdicts, session memory, and fail-open store handling."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from editguard.decision import ALLOW, Decision, DecisionEngine, Verdict
from editguard.persistence import DEFAULT_RETENTION, MemoryWarningStore
from editguard.rules.context import EditContext
from editguard.rules.dangerous_sinks import EVAL_RULE
from editguard.rules.dom_sinks import DOCUMENT_WRITE_RULE

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class _Clock:
    """Settable clock for deterministic timestamps."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class _BrokenStore:
    """Store whose every operation raises."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def has_been_warned(self, session_id: str, rule_id: str, file_path: str) -> bool:
        self.calls.append("has_been_warned")
        raise OSError("disk on fire")

    def record_warning(self, session_id: str, rule_id: str, file_path: str, now: datetime) -> bool:
        self.calls.append("record_warning")
        raise OSError("disk on fire")

    def prune(self, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> int:
        self.calls.append("prune")
        raise OSError("disk on fire")

    def close(self) -> None:
        pass


class _LosingRaceStore(MemoryWarningStore):
    """Reports unwarned on lookup, then loses the insert to a concurrent writer."""

    def has_been_warned(self, session_id: str, rule_id: str, file_path: str) -> bool:
        return False

    def record_warning(self, session_id: str, rule_id: str, file_path: str, now: datetime) -> bool:
        return False


def _edit(content: str, path: str = "a.ts", tool: str = "Edit") -> EditContext:
    return EditContext(tool_name=tool, file_path=path, content=content)


@pytest.fixture()
def store() -> MemoryWarningStore:
    return MemoryWarningStore()


@pytest.fixture()
def engine(store: MemoryWarningStore) -> DecisionEngine:
    return DecisionEngine(store, clock=_Clock())


class TestFirstAndRepeat:
    def test_first_match_blocks(self, engine: DecisionEngine) -> None:
        decision = engine.decide("s1", _edit("localStorage.setItem('authToken', t)"))
        assert decision.verdict is Verdict.BLOCK
        assert "localStorage" in decision.message()

    def test_repeat_same_file_allows(self, engine: DecisionEngine) -> None:
        ctx = _edit("localStorage.setItem('authToken', t)")
        assert engine.decide("s1", ctx).verdict is Verdict.BLOCK
        second = engine.decide("s1", ctx)
        assert second.verdict is Verdict.ALLOW
        assert second.message() == ""
        assert [r.id for r in second.already_rules] == ["local-storage-tokens"]

    def test_other_file_blocks_again(self, engine: DecisionEngine) -> None:
        content = "localStorage.setItem('authToken', t)"
        assert engine.decide("s1", _edit(content, "a.ts")).blocked
        assert engine.decide("s1", _edit(content, "b.ts")).blocked
        assert not engine.decide("s1", _edit(content, "a.ts")).blocked
        assert not engine.decide("s1", _edit(content, "b.ts")).blocked

    def test_other_session_blocks_again(self, engine: DecisionEngine) -> None:
        ctx = _edit("eval(x)")
        assert engine.decide("s1", ctx).blocked
        assert engine.decide("s2", ctx).blocked

    def test_records_first_warning_time(
        self, store: MemoryWarningStore, engine: DecisionEngine
    ) -> None:
        engine.decide("s1", _edit("eval(x)"))
        assert store.get_session_warnings("s1") == {("eval-injection", "a.ts"): T0}


class TestMultipleMatches:
    def test_two_new_rules_single_block(self, engine: DecisionEngine) -> None:
        decision = engine.decide("s1", _edit("eval(a); document.write(b);", "page.js"))
        assert decision.verdict is Verdict.BLOCK
        assert [r.id for r in decision.new_rules] == ["eval-injection", "document-write-xss"]
        message = decision.message()
        assert EVAL_RULE.reminder.strip() in message
        assert DOCUMENT_WRITE_RULE.reminder.strip() in message
        assert message.index("[eval-injection]") < message.index("[document-write-xss]")

    def test_mixed_new_and_already(self, engine: DecisionEngine) -> None:
        engine.decide("s1", _edit("eval(a)", "page.js"))
        decision = engine.decide("s1", _edit("eval(a); document.write(b);", "page.js"))
        assert decision.verdict is Verdict.BLOCK
        assert [r.id for r in decision.new_rules] == ["document-write-xss"]
        assert [r.id for r in decision.already_rules] == ["eval-injection"]
        assert "[eval-injection]" not in decision.message()

    def test_all_already_allows(self, engine: DecisionEngine) -> None:
        ctx = _edit("eval(a); document.write(b);", "page.js")
        engine.decide("s1", ctx)
        assert engine.decide("s1", ctx).verdict is Verdict.ALLOW


class TestNoMatch:
    def test_clean_content(self, store: MemoryWarningStore, engine: DecisionEngine) -> None:
        assert engine.decide("s1", _edit("const x = 1;")) is ALLOW
        assert store.list_sessions() == []

    def test_read_operation(self, store: MemoryWarningStore, engine: DecisionEngine) -> None:
        assert engine.decide("s1", _edit("eval(x)", tool="Read")) is ALLOW
        assert store.list_sessions() == []

    def test_workflow_path_blocks_once(self, engine: DecisionEngine) -> None:
        ctx = _edit("name: CI", ".github/workflows/ci.yml", tool="Write")
        first = engine.decide("s1", ctx)
        assert first.blocked
        assert [r.id for r in first.new_rules] == ["github-actions-workflow"]
        assert not engine.decide("s1", ctx).blocked


class TestGlobalSwitch:
    def test_disabled_always_allows(self, store: MemoryWarningStore) -> None:
        engine = DecisionEngine(store, clock=_Clock(), enabled=False)
        for content in ("eval(x)", "localStorage.setItem('k', v)", "os.system(c)"):
            assert engine.decide("s1", _edit(content)) is ALLOW

    def test_disabled_mutates_nothing(self) -> None:
        broken = _BrokenStore()
        engine = DecisionEngine(broken, clock=_Clock(), enabled=False)  # type: ignore[arg-type]
        engine.decide("s1", _edit("eval(x)"))
        assert broken.calls == []


class TestPruning:
    def test_prunes_expired_sessions_on_match(self, store: MemoryWarningStore) -> None:
        clock = _Clock()
        engine = DecisionEngine(store, clock=clock)
        engine.decide("old", _edit("eval(x)"))
        clock.now = T0 + timedelta(days=31)
        engine.decide("new", _edit("eval(x)"))
        assert store.list_sessions() == ["new"]

    def test_retention_is_configurable(self, store: MemoryWarningStore) -> None:
        clock = _Clock()
        engine = DecisionEngine(store, clock=clock, retention=timedelta(days=1))
        engine.decide("s1", _edit("eval(x)"))
        clock.now = T0 + timedelta(days=2)
        # Session expired, so the same pair warns again
        assert engine.decide("s1", _edit("eval(x)")).blocked

    def test_recent_session_survives(self, store: MemoryWarningStore) -> None:
        clock = _Clock()
        engine = DecisionEngine(store, clock=clock)
        engine.decide("s1", _edit("eval(x)"))
        clock.now = T0 + timedelta(days=29)
        assert not engine.decide("s1", _edit("eval(x)")).blocked


class TestStoreFailures:
    def test_broken_store_treated_as_empty(self) -> None:
        broken = _BrokenStore()
        engine = DecisionEngine(broken, clock=_Clock())  # type: ignore[arg-type]
        decision = engine.decide("s1", _edit("eval(x)"))
        assert decision.verdict is Verdict.BLOCK
        assert {"prune", "has_been_warned", "record_warning"} <= set(broken.calls)

    def test_lost_race_is_already_warned(self) -> None:
        engine = DecisionEngine(_LosingRaceStore(), clock=_Clock())
        decision = engine.decide("s1", _edit("eval(x)"))
        assert decision.verdict is Verdict.ALLOW
        assert [r.id for r in decision.already_rules] == ["eval-injection"]


class TestDecisionMessage:
    def test_header_names_file(self) -> None:
        decision = Decision(verdict=Verdict.BLOCK, file_path="src/a.ts", new_rules=[EVAL_RULE])
        assert decision.message().startswith("Security reminder for src/a.ts:")

    def test_display_path_override(self) -> None:
        decision = Decision(verdict=Verdict.BLOCK, file_path="raw", new_rules=[EVAL_RULE])
        assert "for clean:" in decision.message("clean")

    def test_no_path(self) -> None:
        decision = Decision(verdict=Verdict.BLOCK, new_rules=[EVAL_RULE])
        assert decision.message().startswith("Security reminder:")

    def test_verdict_values_are_exit_codes(self) -> None:
        assert int(Verdict.ALLOW) == 0
        assert int(Verdict.BLOCK) == 2
