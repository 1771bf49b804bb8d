"""Core type definitions — re-exported from sub-modules."""

from .messages import ContentPart, ImageFileContent, ImageUrlContent, Message, TextContent, to_content_part
from .tools import ToolCall, ToolOutput, ToolResult
from .events import (
    RunEvent, RunStartedEvent, MessageEvent, RequiredActionEvent,
    ToolCallStartEvent, ToolCallEndEvent, ToolOutputsSubmittedEvent, RunCompletedEvent,
)
from .stream import (
    MessageObject, RunObject, RunStepObject, MessageDeltaObject, RunStepDeltaObject,
    OtherEvent, RequiredAction, RequiredToolCall, FunctionCall, RunStreamEvent, StreamObject,
    decode_event,
)

__all__ = [
    "ContentPart", "ImageFileContent", "ImageUrlContent", "Message", "TextContent", "to_content_part",
    "ToolCall", "ToolOutput", "ToolResult",
    "RunEvent", "RunStartedEvent", "MessageEvent", "RequiredActionEvent",
    "ToolCallStartEvent", "ToolCallEndEvent", "ToolOutputsSubmittedEvent", "RunCompletedEvent",
    "MessageObject", "RunObject", "RunStepObject", "MessageDeltaObject", "RunStepDeltaObject",
    "OtherEvent", "RequiredAction", "RequiredToolCall", "FunctionCall", "RunStreamEvent", "StreamObject",
    "decode_event",
]
