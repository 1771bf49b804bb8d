"""
Pytest Configuration and Fixtures
"""

import json
from typing import Any

import pytest

from threadloom import Assistant
from threadloom.errors import TransportError
from threadloom.transport import DONE, ServerSentEvent
from threadloom.types import MessageObject


def sse(payload: Any, event: str | None = None) -> ServerSentEvent:
    data = payload if isinstance(payload, str) else json.dumps(payload)
    return ServerSentEvent(data=data, event=event)


def done() -> ServerSentEvent:
    return ServerSentEvent(data=DONE)


def message(msg_id: str, text: str, role: str = "assistant", status: str = "completed") -> ServerSentEvent:
    return sse(
        {
            "id": msg_id,
            "object": "thread.message",
            "thread_id": "thread_1",
            "role": role,
            "status": status,
            "content": [{"type": "text", "text": {"value": text, "annotations": []}}],
        },
        event="thread.message.completed",
    )


def tool_call(call_id: str, name: str, arguments: Any = "{}") -> dict:
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}


def run(run_id: str = "run_1", status: str = "in_progress", tool_calls: list | None = None) -> ServerSentEvent:
    payload: dict = {"id": run_id, "object": "thread.run", "thread_id": "thread_1", "status": status}
    if tool_calls is not None:
        payload["status"] = "requires_action"
        payload["required_action"] = {
            "type": "submit_tool_outputs",
            "submit_tool_outputs": {"tool_calls": tool_calls},
        }
    return sse(payload, event=f"thread.run.{payload['status']}")


class ScriptedTransport:
    """In-memory transport: each create_run/submit_tool_outputs opens the next scripted segment."""

    def __init__(self, segments: list[list[ServerSentEvent]] | None = None, fail: set[str] | None = None):
        self.segments = list(segments or [])
        self.fail = fail or set()
        self.runs: list[dict] = []
        self.submissions: list[tuple[str, list]] = []
        self.created_messages: list[tuple[str, str, list]] = []
        self.closed = 0
        self._thread_count = 0

    def _check(self, operation: str) -> None:
        if operation in self.fail:
            raise TransportError(operation, "scripted failure", status_code=500)

    async def create_thread(self) -> str:
        self._check("create_thread")
        self._thread_count += 1
        return f"thread_{self._thread_count}"

    async def create_message(self, thread_id: str, role: str, content: list) -> MessageObject:
        self._check("create_message")
        self.created_messages.append((thread_id, role, content))
        wire = []
        for part in content:
            if part["type"] == "text":
                wire.append({"type": "text", "text": {"value": part["text"], "annotations": []}})
            else:
                wire.append(part)
        return MessageObject.model_validate({
            "id": f"msg_user_{len(self.created_messages)}",
            "thread_id": thread_id,
            "role": role,
            "content": wire,
        })

    async def create_run(self, thread_id, assistant_id, *, stream=True, parallel_tool_calls=None):
        self._check("create_run")
        self.runs.append({
            "thread_id": thread_id,
            "assistant_id": assistant_id,
            "stream": stream,
            "parallel_tool_calls": parallel_tool_calls,
        })
        return self._next_segment()

    async def submit_tool_outputs(self, thread_id, run_id, outputs, *, stream=True):
        self._check("submit_tool_outputs")
        self.submissions.append((run_id, list(outputs)))
        return self._next_segment()

    def _next_segment(self):
        records = self.segments.pop(0) if self.segments else []
        return self._stream(records)

    async def _stream(self, records):
        try:
            for record in records:
                yield record
        finally:
            self.closed += 1


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def assistant(transport: ScriptedTransport) -> Assistant:
    return Assistant("asst_1", transport)
