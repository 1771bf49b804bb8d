"""Wire models for run stream events, decoded from SSE payloads.

Every server event carries an ``object`` field naming its kind. The kinds the
run loop cares about get their own model; everything else, including kinds
the server may add later, decodes into :class:`OtherEvent` so that new event
types never break an existing client.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter, ValidationError

from ..errors import DecodeError


class WireModel(BaseModel):
    model_config = ConfigDict(extra="allow")


# -- Message content --


class TextValue(WireModel):
    value: str
    annotations: list[Any] = Field(default_factory=list)


class TextContentBlock(WireModel):
    type: Literal["text"]
    text: TextValue


class ImageFile(WireModel):
    file_id: str
    detail: str | None = None


class ImageFileContentBlock(WireModel):
    type: Literal["image_file"]
    image_file: ImageFile


class ImageURL(WireModel):
    url: str
    detail: str | None = None


class ImageURLContentBlock(WireModel):
    type: Literal["image_url"]
    image_url: ImageURL


class OtherContentBlock(WireModel):
    type: str


_CONTENT_TAGS = {"text", "image_file", "image_url"}


def _content_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in _CONTENT_TAGS else "other"


MessageContent = Annotated[
    Union[
        Annotated[TextContentBlock, Tag("text")],
        Annotated[ImageFileContentBlock, Tag("image_file")],
        Annotated[ImageURLContentBlock, Tag("image_url")],
        Annotated[OtherContentBlock, Tag("other")],
    ],
    Discriminator(_content_tag),
]


# -- Stream objects --


class MessageObject(WireModel):
    id: str
    object: Literal["thread.message"] = "thread.message"
    thread_id: str | None = None
    run_id: str | None = None
    assistant_id: str | None = None
    role: str = "assistant"
    status: str | None = None
    created_at: int | None = None
    content: list[MessageContent] = Field(default_factory=list)


class FunctionCall(WireModel):
    name: str
    arguments: str = ""


class RequiredToolCall(WireModel):
    id: str
    type: str = "function"
    function: FunctionCall


class SubmitToolOutputsAction(WireModel):
    tool_calls: list[RequiredToolCall] = Field(default_factory=list)


class RequiredAction(WireModel):
    type: str = "submit_tool_outputs"
    submit_tool_outputs: SubmitToolOutputsAction


class RunObject(WireModel):
    id: str
    object: Literal["thread.run"] = "thread.run"
    thread_id: str | None = None
    assistant_id: str | None = None
    status: str | None = None
    required_action: RequiredAction | None = None


class RunStepObject(WireModel):
    id: str
    object: Literal["thread.run.step"] = "thread.run.step"
    run_id: str | None = None
    status: str | None = None


class MessageDeltaObject(WireModel):
    id: str
    object: Literal["thread.message.delta"] = "thread.message.delta"
    delta: dict[str, Any] = Field(default_factory=dict)


class RunStepDeltaObject(WireModel):
    id: str
    object: Literal["thread.run.step.delta"] = "thread.run.step.delta"
    delta: dict[str, Any] = Field(default_factory=dict)


class OtherEvent(WireModel):
    object: str | None = None


_EVENT_TAGS = {
    "thread.message",
    "thread.run",
    "thread.run.step",
    "thread.message.delta",
    "thread.run.step.delta",
}


def _event_tag(value: Any) -> str:
    tag = value.get("object") if isinstance(value, dict) else getattr(value, "object", None)
    return tag if tag in _EVENT_TAGS else "other"


RunStreamEvent = Annotated[
    Union[
        Annotated[MessageObject, Tag("thread.message")],
        Annotated[RunObject, Tag("thread.run")],
        Annotated[RunStepObject, Tag("thread.run.step")],
        Annotated[MessageDeltaObject, Tag("thread.message.delta")],
        Annotated[RunStepDeltaObject, Tag("thread.run.step.delta")],
        Annotated[OtherEvent, Tag("other")],
    ],
    Discriminator(_event_tag),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(RunStreamEvent)


StreamObject = Union[
    MessageObject, RunObject, RunStepObject, MessageDeltaObject, RunStepDeltaObject, OtherEvent
]


def decode_event(payload: str) -> StreamObject:
    """Decode one SSE payload. Raises :class:`DecodeError` on malformed input."""
    try:
        return _EVENT_ADAPTER.validate_json(payload)
    except ValidationError as e:
        raise DecodeError(f"Malformed stream event: {e}", payload=payload, cause=e) from e
