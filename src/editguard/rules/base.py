# SPDX-License-Identifier: MIT
"""Rule protocol and the two rule variants: content substrings and path predicates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from editguard.rules.context import EditContext


@runtime_checkable
class Rule(Protocol):
    """Protocol that every guard rule must satisfy."""

    id: str
    reminder: str

    def matches(self, ctx: EditContext) -> bool: ...


@dataclass(frozen=True)
class SubstringRule:
    """Match when any one literal substring appears in the proposed content.

    Matching is case-sensitive and stops at the first hit.
    """

    id: str
    substrings: tuple[str, ...]
    reminder: str

    def matches(self, ctx: EditContext) -> bool:
        content = ctx.content
        if not content:
            return False
        return any(s in content for s in self.substrings)


@dataclass(frozen=True)
class PathRule:
    """Match on the target file path alone; content is ignored."""

    id: str
    path_check: Callable[[str], bool]
    reminder: str

    def matches(self, ctx: EditContext) -> bool:
        return bool(ctx.file_path) and self.path_check(ctx.file_path)
