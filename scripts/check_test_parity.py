#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Test parity check — every editguard module with real logic has a test file.

Usage:
    python scripts/check_test_parity.py          # exit 1 and list gaps
    python scripts/check_test_parity.py --list   # print module -> test mapping
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = ROOT / "src" / "editguard"
TEST_DIR = ROOT / "tests"

SKIP_FILES = {"__init__.py", "__main__.py"}

# Modules below this many code lines are data or glue
MIN_LOC = 20

# Source path relative to SRC_DIR -> test file, or "skip"
TEST_MAP: dict[str, str] = {
    "rules/base.py": "skip",
    "rules/registry.py": "test_editguard_rules_engine.py",
    "rules/context.py": "test_editguard_rules_context.py",
    "rules/engine.py": "test_editguard_rules_engine.py",
    "rules/config.py": "test_editguard_rules_config.py",
    "rules/workflow_injection.py": "test_editguard_rule_workflow.py",
    "rules/dangerous_sinks.py": "test_editguard_rule_sinks.py",
    "rules/dom_sinks.py": "test_editguard_rule_dom.py",
    "rules/token_storage.py": "test_editguard_rule_dom.py",
}


def _count_loc(path: Path) -> int:
    """Count non-blank, non-comment lines."""
    with open(path, encoding="utf-8") as f:
        return sum(1 for line in f if line.strip() and not line.strip().startswith("#"))


def expected_test(rel: str) -> str:
    """Test file name for a source path relative to SRC_DIR."""
    if rel in TEST_MAP:
        return TEST_MAP[rel]
    return "test_editguard_" + rel.removesuffix(".py").replace("/", "_") + ".py"


def find_violations() -> list[str]:
    """Return source modules whose test file is missing."""
    violations = []
    for src_file in sorted(SRC_DIR.rglob("*.py")):
        if src_file.name in SKIP_FILES:
            continue
        rel = src_file.relative_to(SRC_DIR).as_posix()
        test_name = expected_test(rel)
        if test_name == "skip":
            continue
        loc = _count_loc(src_file)
        if loc < MIN_LOC:
            continue
        if not (TEST_DIR / test_name).exists():
            violations.append(f"{rel} ({loc} LOC) -> missing {test_name}")
    return violations


def main() -> None:
    if len(sys.argv) > 2 or sys.argv[1:] not in ([], ["--list"]):
        print(f"Usage: {sys.argv[0]} [--list]", file=sys.stderr)
        sys.exit(2)

    if sys.argv[1:] == ["--list"]:
        for src_file in sorted(SRC_DIR.rglob("*.py")):
            if src_file.name not in SKIP_FILES:
                rel = src_file.relative_to(SRC_DIR).as_posix()
                print(f"{rel} -> {expected_test(rel)}")
        return

    violations = find_violations()
    if violations:
        print(f"Missing test files ({len(violations)}):")
        for v in violations:
            print(f"  {v}")
        sys.exit(1)
    print("All source modules have test files.")


if __name__ == "__main__":
    main()
