# SPDX-License-Identifier: MIT
"""Pydantic models for the PreToolUse hook payload read from stdin."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from editguard.rules.context import EditContext, build_context


class HookEvent(BaseModel):
    """One inbound tool-use event.

    Only ``tool_name`` is required. ``tool_input`` stays a free-form dict
    because its shape depends on the tool; content extraction lives in
    :func:`editguard.rules.context.extract_content`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    tool_name: str
    tool_input: dict[str, Any] = Field(default_factory=dict)
    session_id: str | None = None
    hook_event_name: str | None = None
    cwd: str | None = None
    transcript_path: str | None = None

    @property
    def file_path(self) -> str:
        value = self.tool_input.get("file_path")
        return value if isinstance(value, str) else ""

    def to_context(self) -> EditContext:
        return build_context(self.tool_name, self.tool_input)
