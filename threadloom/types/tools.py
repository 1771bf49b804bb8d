"""Tool call types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: str


@dataclass
class ToolOutput:
    tool_call_id: str
    output: str

    def to_payload(self) -> dict[str, Any]:
        return {"tool_call_id": self.tool_call_id, "output": self.output}


@dataclass
class ToolResult:
    tool_call_id: str
    tool_name: str
    output: str
    error: Exception | None = None
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.error is None

    def to_output(self) -> ToolOutput:
        return ToolOutput(tool_call_id=self.tool_call_id, output=self.output)
