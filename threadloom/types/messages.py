"""Message types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .stream import MessageObject


@dataclass
class TextContent:
    text: str
    type: str = "text"

    def to_payload(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class ImageFileContent:
    file_id: str
    detail: str | None = None
    type: str = "image_file"

    def to_payload(self) -> dict[str, Any]:
        image: dict[str, Any] = {"file_id": self.file_id}
        if self.detail:
            image["detail"] = self.detail
        return {"type": "image_file", "image_file": image}


@dataclass
class ImageUrlContent:
    url: str
    detail: str | None = None
    type: str = "image_url"

    def to_payload(self) -> dict[str, Any]:
        image: dict[str, Any] = {"url": self.url}
        if self.detail:
            image["detail"] = self.detail
        return {"type": "image_url", "image_url": image}


ContentPart = Union[TextContent, ImageFileContent, ImageUrlContent]


def to_content_part(content: ContentPart | str) -> ContentPart:
    if isinstance(content, str):
        return TextContent(text=content)
    if isinstance(content, (TextContent, ImageFileContent, ImageUrlContent)):
        return content
    raise TypeError(f"Unsupported message content: {type(content).__name__}")


@dataclass
class Message:
    """Simplified view of a remote thread message."""

    id: str
    role: str
    content: list[ContentPart] = field(default_factory=list)
    raw: MessageObject | None = None

    @classmethod
    def from_raw(cls, raw: MessageObject) -> Message:
        parts: list[ContentPart] = []
        for part in raw.content:
            if part.type == "text":
                parts.append(TextContent(text=part.text.value))
            elif part.type == "image_file":
                parts.append(ImageFileContent(file_id=part.image_file.file_id, detail=part.image_file.detail))
            elif part.type == "image_url":
                parts.append(ImageUrlContent(url=part.image_url.url, detail=part.image_url.detail))
        return cls(id=raw.id, role=raw.role, content=parts, raw=raw)

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.content if isinstance(p, TextContent))
