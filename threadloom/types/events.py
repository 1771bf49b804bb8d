"""Run observation events."""

from __future__ import annotations

from dataclasses import dataclass, field

from .messages import Message
from .tools import ToolCall, ToolOutput


@dataclass
class RunStartedEvent:
    thread_id: str
    assistant_id: str
    type: str = "run:started"


@dataclass
class MessageEvent:
    message: Message
    replaced: bool = False
    type: str = "run:message"


@dataclass
class RequiredActionEvent:
    run_id: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    type: str = "run:required_action"


@dataclass
class ToolCallStartEvent:
    run_id: str
    call: ToolCall
    type: str = "tool:start"


@dataclass
class ToolCallEndEvent:
    run_id: str
    call: ToolCall
    output: str
    error: Exception | None = None
    duration_ms: int = 0
    type: str = "tool:end"


@dataclass
class ToolOutputsSubmittedEvent:
    run_id: str
    outputs: list[ToolOutput] = field(default_factory=list)
    type: str = "run:submitted"


@dataclass
class RunCompletedEvent:
    thread_id: str
    messages: list[Message] = field(default_factory=list)
    segments: int = 0
    duration_ms: int = 0
    type: str = "run:completed"


RunEvent = (
    RunStartedEvent
    | MessageEvent
    | RequiredActionEvent
    | ToolCallStartEvent
    | ToolCallEndEvent
    | ToolOutputsSubmittedEvent
    | RunCompletedEvent
)
