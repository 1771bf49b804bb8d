"""Client and run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """Settings for the default OpenAI-backed transport."""

    api_key: str | None = Field(None, description="API key; the SDK falls back to OPENAI_API_KEY")
    base_url: str | None = Field(None, description="API base URL")
    organization: str | None = Field(None, description="Organization id")
    timeout: float | None = Field(None, description="Per-request timeout in seconds")
    max_retries: int = Field(0, description="SDK-level retries; the run loop itself never retries")
    default_headers: dict[str, str] | None = Field(None, description="Extra headers on every request")

    def client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"max_retries": self.max_retries}
        for key in ("api_key", "base_url", "organization", "timeout", "default_headers"):
            value = getattr(self, key)
            if value is not None:
                kwargs[key] = value
        return kwargs


@dataclass
class RunConfig:
    tool_timeout: float | None = None  # seconds per handler call
    stream_idle_timeout: float | None = None  # seconds between SSE records
