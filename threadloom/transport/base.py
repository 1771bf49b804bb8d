"""Transport protocol consumed by the run loop."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from ..types import MessageObject, ToolOutput

DONE = "[DONE]"


@dataclass
class ServerSentEvent:
    data: str | None = None
    event: str | None = None
    id: str | None = None

    @property
    def is_done(self) -> bool:
        return self.data == DONE


EventStream = AsyncIterator[ServerSentEvent]


@runtime_checkable
class Transport(Protocol):
    async def create_thread(self) -> str: ...

    async def create_message(
        self, thread_id: str, role: str, content: list[dict[str, Any]]
    ) -> MessageObject: ...

    async def create_run(
        self,
        thread_id: str,
        assistant_id: str,
        *,
        stream: bool = True,
        parallel_tool_calls: bool | None = None,
    ) -> EventStream: ...

    async def submit_tool_outputs(
        self,
        thread_id: str,
        run_id: str,
        outputs: list[ToolOutput],
        *,
        stream: bool = True,
    ) -> EventStream: ...
