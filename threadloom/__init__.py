"""threadloom: run loop for assistant threads with local tool dispatch."""

from .assistant import Assistant
from .config import ClientConfig, RunConfig
from .errors import (
    DecodeError,
    StreamTimeoutError,
    ThreadloomError,
    ToolError,
    ToolHandlerError,
    ToolNotFoundError,
    ToolTimeoutError,
    TransportError,
)
from .events import EventBus
from .run import RunLoop, RunState
from .thread import Thread
from .tools import CallArgument, ToolRegistry
from .transport import OpenAITransport, ServerSentEvent, Transport
from .types import ImageFileContent, ImageUrlContent, Message, TextContent

__version__ = "0.1.0"

__all__ = [
    "Assistant", "Thread", "RunLoop", "RunState",
    "ClientConfig", "RunConfig",
    "CallArgument", "ToolRegistry", "EventBus",
    "OpenAITransport", "ServerSentEvent", "Transport",
    "Message", "TextContent", "ImageFileContent", "ImageUrlContent",
    "ThreadloomError", "TransportError", "DecodeError", "StreamTimeoutError",
    "ToolError", "ToolNotFoundError", "ToolHandlerError", "ToolTimeoutError",
]
