"""Remote assistant identity, tool table and thread factory."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import ClientConfig, RunConfig
from .events import EventBus, Handler as EventHandler
from .thread import Thread
from .tools import _INFER, Handler, ToolRegistry
from .transport import OpenAITransport, Transport

logger = logging.getLogger(__name__)


class Assistant:
    """Entry point: register tools, create threads, run them.

    Usage::

        assistant = Assistant.from_config("asst_123", ClientConfig(api_key="..."))

        @assistant.tool("getWeather")
        async def get_weather(query: WeatherQuery) -> Weather:
            ...

        thread = await assistant.create_thread()
        await thread.add_message("How warm is it in Zurich?")
        messages = await thread.run()
    """

    def __init__(
        self,
        assistant_id: str,
        transport: Transport,
        *,
        tools: ToolRegistry | None = None,
        events: EventBus | None = None,
        run_config: RunConfig | None = None,
    ) -> None:
        self.id = assistant_id
        self.transport = transport
        self.tools = tools or ToolRegistry()
        self.events = events or EventBus()
        self.run_config = run_config or RunConfig()

    @classmethod
    def from_config(
        cls, assistant_id: str, config: ClientConfig | None = None, **kwargs: Any
    ) -> Assistant:
        return cls(assistant_id, OpenAITransport(config), **kwargs)

    def set_tool(
        self,
        name: str,
        handler: Handler,
        *,
        input_type: Any = _INFER,
        output_type: Any = _INFER,
    ) -> None:
        """Register ``handler`` under ``name``, replacing any previous one.

        The input type defaults to the annotation of the handler's first
        parameter and the output type to its return annotation; ``-> None``
        (or ``output_type=None``) submits an empty output.
        """
        self.tools.register(name, handler, input_type=input_type, output_type=output_type)
        logger.debug("Assistant %s registered tool %s", self.id, name)

    def tool(self, name: str | None = None, **kwargs: Any) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.set_tool(name or handler.__name__, handler, **kwargs)
            return handler
        return decorator

    def on(self, event_type: str, handler: EventHandler) -> None:
        self.events.on(event_type, handler)

    async def create_thread(self) -> Thread:
        thread_id = await self.transport.create_thread()
        logger.info("Created thread %s", thread_id)
        return Thread(thread_id, self, self.transport)

    def thread(self, thread_id: str) -> Thread:
        """Attach to an existing remote thread without a request."""
        return Thread(thread_id, self, self.transport)
