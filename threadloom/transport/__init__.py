from .base import DONE, EventStream, ServerSentEvent, Transport
from .openai import OpenAITransport

__all__ = ["DONE", "EventStream", "OpenAITransport", "ServerSentEvent", "Transport"]
