"""OpenAI Assistants transport built on the official SDK."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import openai
from openai import AsyncOpenAI

from ..config import ClientConfig
from ..errors import TransportError
from ..types import MessageObject, ToolOutput
from .base import DONE, EventStream, ServerSentEvent

logger = logging.getLogger(__name__)


def _transport_error(operation: str, err: openai.APIError) -> TransportError:
    return TransportError(
        operation, err.message, status_code=getattr(err, "status_code", None), cause=err
    )


class OpenAITransport:
    """Adapts ``client.beta.threads`` to the :class:`~threadloom.transport.Transport` protocol.

    The SDK decodes SSE framing itself; each decoded event is re-framed as a
    :class:`ServerSentEvent` carrying the JSON payload, and every segment ends
    with a ``[DONE]`` record.
    """

    def __init__(self, config: ClientConfig | None = None, client: AsyncOpenAI | None = None) -> None:
        self.config = config or ClientConfig()
        self._client = client or AsyncOpenAI(**self.config.client_kwargs())

    @property
    def client(self) -> AsyncOpenAI:
        return self._client

    async def create_thread(self) -> str:
        try:
            thread = await self._client.beta.threads.create()
        except openai.APIError as e:
            raise _transport_error("create_thread", e) from e
        return thread.id

    async def create_message(
        self, thread_id: str, role: str, content: list[dict[str, Any]]
    ) -> MessageObject:
        try:
            message = await self._client.beta.threads.messages.create(
                thread_id, role=role, content=content
            )
        except openai.APIError as e:
            raise _transport_error("create_message", e) from e
        return MessageObject.model_validate(message.model_dump(mode="json"))

    async def create_run(
        self,
        thread_id: str,
        assistant_id: str,
        *,
        stream: bool = True,
        parallel_tool_calls: bool | None = None,
    ) -> EventStream:
        kwargs: dict[str, Any] = {"assistant_id": assistant_id, "stream": stream}
        if parallel_tool_calls is not None:
            kwargs["parallel_tool_calls"] = parallel_tool_calls
        try:
            response = await self._client.beta.threads.runs.create(thread_id, **kwargs)
        except openai.APIError as e:
            raise _transport_error("create_run", e) from e
        return self._events("create_run", response, stream)

    async def submit_tool_outputs(
        self,
        thread_id: str,
        run_id: str,
        outputs: list[ToolOutput],
        *,
        stream: bool = True,
    ) -> EventStream:
        try:
            response = await self._client.beta.threads.runs.submit_tool_outputs(
                run_id,
                thread_id=thread_id,
                tool_outputs=[o.to_payload() for o in outputs],
                stream=stream,
            )
        except openai.APIError as e:
            raise _transport_error("submit_tool_outputs", e) from e
        return self._events("submit_tool_outputs", response, stream)

    def _events(self, operation: str, response: Any, stream: bool) -> EventStream:
        if stream:
            return SegmentStream(operation, response)
        return _single(response)


class SegmentStream:
    """Re-framed view of one SDK stream.

    ``aclose()`` releases the underlying HTTP response even when iteration
    never began, which a bare async generator cannot do.
    """

    def __init__(self, operation: str, stream: Any) -> None:
        self._stream = stream
        self._records = _reframe(operation, stream)

    def __aiter__(self) -> SegmentStream:
        return self

    async def __anext__(self) -> ServerSentEvent:
        return await self._records.__anext__()

    async def aclose(self) -> None:
        try:
            await self._records.aclose()
        finally:
            await self._stream.close()


async def _reframe(operation: str, stream: Any) -> AsyncIterator[ServerSentEvent]:
    try:
        async with stream:
            async for event in stream:
                yield ServerSentEvent(data=event.data.model_dump_json(), event=event.event)
    except openai.APIError as e:
        raise _transport_error(operation, e) from e
    yield ServerSentEvent(data=DONE)


async def _single(run: Any) -> AsyncIterator[ServerSentEvent]:
    # Non-streaming responses carry just the run object.
    yield ServerSentEvent(data=run.model_dump_json(), event="thread.run")
    yield ServerSentEvent(data=DONE)
