"""RunLoop: drives one run from creation to completion.

A run is consumed as a sequence of stream segments. The first segment comes
from creating the run; each required action is answered by dispatching its
tool calls locally and submitting the outputs, which yields the next segment.
The run is complete once a segment ends without producing a new one.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Any

from .config import RunConfig
from .errors import StreamTimeoutError
from .events import EventBus
from .tools import ToolRegistry
from .transport import EventStream, ServerSentEvent, Transport
from .types import (
    Message,
    MessageEvent,
    MessageObject,
    OtherEvent,
    RequiredActionEvent,
    RunCompletedEvent,
    RunEvent,
    RunObject,
    RunStartedEvent,
    ToolCall,
    ToolCallEndEvent,
    ToolCallStartEvent,
    ToolOutput,
    ToolOutputsSubmittedEvent,
    decode_event,
)

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    STARTING = "starting"
    STREAMING = "streaming"
    AWAITING_TOOL_DISPATCH = "awaiting_tool_dispatch"
    RESUBMITTING = "resubmitting"
    COMPLETED = "completed"
    FAILED = "failed"


class RunLoop:
    """Executes a single run. Instances are single-use and owned by one task."""

    def __init__(
        self,
        thread_id: str,
        assistant_id: str,
        transport: Transport,
        tools: ToolRegistry,
        events: EventBus | None = None,
        config: RunConfig | None = None,
    ) -> None:
        self.thread_id = thread_id
        self.assistant_id = assistant_id
        self.transport = transport
        self.tools = tools
        self.events = events
        self.config = config or RunConfig()
        self.state = RunState.STARTING
        self.segments = 0
        self._messages: dict[str, MessageObject] = {}
        self._dispatched: set[str] = set()

    @property
    def dispatched(self) -> frozenset[str]:
        return frozenset(self._dispatched)

    async def execute(self, parallel_tool_calls: bool | None = None) -> list[Message]:
        if self.state is not RunState.STARTING:
            raise RuntimeError(f"RunLoop already used (state={self.state.value})")
        start = time.monotonic()
        try:
            stream: EventStream | None = await self.transport.create_run(
                self.thread_id,
                self.assistant_id,
                stream=True,
                parallel_tool_calls=parallel_tool_calls,
            )
            logger.info("Run started on thread %s", self.thread_id)
            await self._emit(RunStartedEvent(thread_id=self.thread_id, assistant_id=self.assistant_id))
            while stream is not None:
                self.segments += 1
                stream = await self._consume(stream)
        except BaseException:
            self._transition(RunState.FAILED)
            raise

        self._transition(RunState.COMPLETED)
        messages = [Message.from_raw(raw) for raw in self._messages.values()]
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Run on thread %s completed: %d messages, %d segments",
            self.thread_id, len(messages), self.segments,
        )
        await self._emit(RunCompletedEvent(
            thread_id=self.thread_id, messages=messages,
            segments=self.segments, duration_ms=duration_ms,
        ))
        return messages

    async def _consume(self, stream: EventStream) -> EventStream | None:
        """Consume one segment; return the stream opened by a resubmission, if any."""
        self._transition(RunState.STREAMING)
        iterator = stream.__aiter__()
        pending: EventStream | None = None
        try:
            while True:
                record = await self._next_record(iterator)
                if record is None or record.is_done:
                    break
                if not record.data:
                    continue
                event = decode_event(record.data)
                if isinstance(event, MessageObject):
                    await self._upsert(event)
                elif isinstance(event, RunObject):
                    logger.debug("Run %s status=%s", event.id, event.status)
                    if event.required_action is not None:
                        if pending is not None:
                            logger.debug("Required action superseded a pending stream")
                            await _close(pending)
                        pending = await self._dispatch(event)
                elif isinstance(event, OtherEvent) and record.event == "error":
                    logger.warning("Server reported an error event: %s", record.data)
        except BaseException:
            if pending is not None:
                await _close(pending)
            raise
        finally:
            await _close(iterator)
        return pending

    async def _next_record(self, iterator: Any) -> ServerSentEvent | None:
        timeout = self.config.stream_idle_timeout
        try:
            if timeout is None:
                return await iterator.__anext__()
            return await asyncio.wait_for(iterator.__anext__(), timeout=timeout)
        except StopAsyncIteration:
            return None
        except asyncio.TimeoutError:
            raise StreamTimeoutError(timeout) from None

    async def _upsert(self, raw: MessageObject) -> None:
        # Assigning to an existing key keeps its original position.
        replaced = raw.id in self._messages
        self._messages[raw.id] = raw
        logger.debug("%s message %s", "Updated" if replaced else "Added", raw.id)
        if self.events is not None:
            await self._emit(MessageEvent(message=Message.from_raw(raw), replaced=replaced))

    async def _dispatch(self, run: RunObject) -> EventStream:
        self._transition(RunState.AWAITING_TOOL_DISPATCH)
        calls = [
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments)
            for tc in run.required_action.submit_tool_outputs.tool_calls
        ]
        await self._emit(RequiredActionEvent(run_id=run.id, tool_calls=calls))

        outputs: list[ToolOutput] = []
        for call in calls:
            if call.id in self._dispatched:
                logger.debug("Skipping already dispatched call %s", call.id)
                continue
            self._dispatched.add(call.id)
            await self._emit(ToolCallStartEvent(run_id=run.id, call=call))
            result = await self.tools.execute(call, timeout=self.config.tool_timeout)
            outputs.append(result.to_output())
            await self._emit(ToolCallEndEvent(
                run_id=run.id, call=call, output=result.output,
                error=result.error, duration_ms=result.duration_ms,
            ))

        self._transition(RunState.RESUBMITTING)
        stream = await self.transport.submit_tool_outputs(
            self.thread_id, run.id, outputs, stream=True
        )
        logger.info("Submitted %d tool outputs for run %s", len(outputs), run.id)
        await self._emit(ToolOutputsSubmittedEvent(run_id=run.id, outputs=outputs))
        self._transition(RunState.STREAMING)
        return stream

    def _transition(self, state: RunState) -> None:
        if state is not self.state:
            logger.debug("Run state %s -> %s", self.state.value, state.value)
            self.state = state

    async def _emit(self, event: RunEvent) -> None:
        if self.events is not None:
            await self.events.emit(event)


async def _close(stream: Any) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()
