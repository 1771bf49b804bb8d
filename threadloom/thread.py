"""A remote conversation thread bound to an Assistant."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import RunConfig
from .run import RunLoop
from .transport import Transport
from .types import ContentPart, Message, to_content_part

if TYPE_CHECKING:
    from .assistant import Assistant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thread:
    id: str
    assistant: Assistant = field(repr=False, compare=False)
    transport: Transport = field(repr=False, compare=False)

    async def add_message(self, *content: ContentPart | str) -> Message:
        """Post a user message made of one or more content parts."""
        if not content:
            raise ValueError("add_message requires at least one content part")
        payload = [to_content_part(c).to_payload() for c in content]
        raw = await self.transport.create_message(self.id, "user", payload)
        logger.debug("Added message %s to thread %s", raw.id, self.id)
        return Message.from_raw(raw)

    async def run(
        self,
        parallel_tool_calls: bool | None = None,
        *,
        config: RunConfig | None = None,
    ) -> list[Message]:
        """Run the assistant on this thread until no action is pending.

        Tool calls requested by the run are answered from the assistant's
        registry. Returns the messages the run produced, in first-seen order.
        """
        loop = RunLoop(
            thread_id=self.id,
            assistant_id=self.assistant.id,
            transport=self.transport,
            tools=self.assistant.tools,
            events=self.assistant.events if self.assistant.events.has_subscribers() else None,
            config=config or self.assistant.run_config,
        )
        return await loop.execute(parallel_tool_calls=parallel_tool_calls)
