# SPDX-License-Identifier: MIT
"""Edit context — the rule-facing view of a single proposed file change."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Tool operations that carry proposed file content
EDIT_OPERATIONS = frozenset({"Edit", "Write", "MultiEdit"})


@dataclass(frozen=True)
class EditContext:
    """Context passed to each rule — operation, target path, proposed text."""

    tool_name: str
    file_path: str
    content: str

    @property
    def is_edit(self) -> bool:
        """True for operations that propose file content (edit/write variants)."""
        return self.tool_name in EDIT_OPERATIONS


def extract_content(tool_name: str, tool_input: dict[str, Any]) -> str:
    """Pull the proposed text out of a tool's input payload.

    Write carries the full file body in ``content``; Edit carries the
    replacement in ``new_string``; MultiEdit carries a list of edits whose
    replacements are joined with newlines. Anything else has no content.
    """
    if tool_name == "Write":
        value = tool_input.get("content")
        return value if isinstance(value, str) else ""
    if tool_name == "Edit":
        value = tool_input.get("new_string")
        return value if isinstance(value, str) else ""
    if tool_name == "MultiEdit":
        edits = tool_input.get("edits")
        if not isinstance(edits, list):
            return ""
        parts: list[str] = []
        for edit in edits:
            if isinstance(edit, dict) and isinstance(edit.get("new_string"), str):
                parts.append(edit["new_string"])
        return "\n".join(parts)
    return ""


def build_context(tool_name: str, tool_input: dict[str, Any]) -> EditContext:
    """Build an EditContext from a raw tool name and input payload."""
    file_path = tool_input.get("file_path")
    return EditContext(
        tool_name=tool_name,
        file_path=file_path if isinstance(file_path, str) else "",
        content=extract_content(tool_name, tool_input),
    )
