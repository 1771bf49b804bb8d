"""Tool schema — pydantic TypeAdapter codecs for handler inputs and outputs."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..errors import DecodeError


class TypeSchema:
    """JSON codec for one declared Python type."""

    def __init__(self, tp: Any = Any) -> None:
        self.type = tp
        self._adapter: TypeAdapter[Any] = TypeAdapter(tp)

    def parse(self, raw: str) -> Any:
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise DecodeError(f"Invalid arguments for {_type_name(self.type)}: {e}", payload=raw, cause=e) from e

    def dump(self, value: Any) -> str:
        return self._adapter.dump_json(value).decode("utf-8")


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)
