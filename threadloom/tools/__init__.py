"""Tool registry, handler adapters and the CallArgument helper."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, get_type_hints

from ..errors import DecodeError, ToolHandlerError, ToolNotFoundError, ToolTimeoutError
from ..types import ToolCall, ToolResult
from .schema import TypeSchema

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

_INFER: Any = object()


@dataclass(frozen=True)
class CallArgument:
    """Raw JSON argument blob of a tool call, decoded on demand."""

    input: str

    def decoded(self, tp: Any = Any) -> Any:
        return TypeSchema(tp).parse(self.input)


class ToolAdapter:
    """Type-erased wrapper: ``await adapter(args_text) -> str | None``.

    Decoding failures raise :class:`~threadloom.errors.DecodeError`; anything
    the handler raises propagates unchanged.
    """

    def __init__(
        self,
        name: str,
        handler: Handler,
        input_type: Any = _INFER,
        output_type: Any = _INFER,
    ) -> None:
        self.name = name
        self.handler = handler
        hints = _type_hints(handler)
        params = [
            p for p in inspect.signature(handler).parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        self.takes_input = bool(params) or input_type is not _INFER
        if input_type is _INFER:
            input_type = hints.get(params[0].name, Any) if params else Any
        self.input_type = input_type
        self._input = None if input_type is CallArgument else TypeSchema(input_type)

        if output_type is _INFER:
            output_type = hints.get("return", _INFER)
        self.returns_value = output_type is not None and output_type is not type(None)
        self._output = TypeSchema(Any if output_type is _INFER else output_type) if self.returns_value else None

    async def __call__(self, args_text: str) -> str | None:
        if not self.takes_input:
            result = self.handler()
        elif self._input is None:
            result = self.handler(CallArgument(args_text))
        else:
            result = self.handler(self._input.parse(args_text))
        if inspect.isawaitable(result):
            result = await result
        if self._output is None or (result is None and self._output.type is Any):
            return None
        return self._output.dump(result)


class ToolRegistry:
    """Name → adapter table. Re-registering a name replaces the previous handler.

    Lookups and registration are serialized by a lock. A dispatch keeps the
    adapter it looked up, so replacing a tool while a call to it is in flight
    does not affect that call.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolAdapter] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        handler: Handler,
        *,
        input_type: Any = _INFER,
        output_type: Any = _INFER,
    ) -> ToolAdapter:
        adapter = ToolAdapter(name, handler, input_type=input_type, output_type=output_type)
        with self._lock:
            replaced = name in self._tools
            self._tools[name] = adapter
        if replaced:
            logger.debug("Replaced tool %s", name)
        return adapter

    def get(self, name: str) -> ToolAdapter | None:
        with self._lock:
            return self._tools.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tools

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

    async def execute(self, call: ToolCall, timeout: float | None = None) -> ToolResult:
        """Run one call. Never raises for tool-level failures; they become output text."""
        adapter = self.get(call.name)
        if adapter is None:
            err = ToolNotFoundError(call.name)
            logger.warning("Unknown tool requested: %s", call.name)
            return ToolResult(tool_call_id=call.id, tool_name=call.name, output=str(err), error=err)

        async def invoke() -> str | None:
            # Only the registry's own deadline may surface as a timeout below.
            try:
                return await adapter(call.arguments)
            except (asyncio.TimeoutError, TimeoutError) as e:
                raise ToolHandlerError(call.name, e) from e

        t0 = time.monotonic()
        try:
            if timeout is None:
                response = await invoke()
            else:
                response = await asyncio.wait_for(invoke(), timeout=timeout)
        except asyncio.TimeoutError:
            err = ToolTimeoutError(call.name, timeout)
            logger.warning("Tool %s timed out after %ss", call.name, timeout)
            return ToolResult(
                tool_call_id=call.id, tool_name=call.name, output=str(err), error=err,
                duration_ms=_elapsed_ms(t0),
            )
        except DecodeError as e:
            logger.warning("Invalid arguments for tool %s: %s", call.name, e)
            return ToolResult(
                tool_call_id=call.id, tool_name=call.name, output=str(e), error=e,
                duration_ms=_elapsed_ms(t0),
            )
        except ToolHandlerError as e:
            logger.warning("Tool %s failed with a timeout of its own: %s", call.name, e.cause)
            return ToolResult(
                tool_call_id=call.id, tool_name=call.name, output=describe_error(e.cause),
                error=e, duration_ms=_elapsed_ms(t0),
            )
        except Exception as e:
            logger.warning("Tool execution error: %s", call.name, exc_info=True)
            return ToolResult(
                tool_call_id=call.id, tool_name=call.name, output=describe_error(e),
                error=ToolHandlerError(call.name, e), duration_ms=_elapsed_ms(t0),
            )
        return ToolResult(
            tool_call_id=call.id, tool_name=call.name, output=response or "",
            duration_ms=_elapsed_ms(t0),
        )


def describe_error(err: Exception) -> str:
    return str(err) or type(err).__name__


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


def _type_hints(handler: Handler) -> dict[str, Any]:
    target = handler if inspect.isroutine(handler) else getattr(handler, "__call__", handler)
    try:
        return get_type_hints(target)
    except (NameError, TypeError):
        logger.warning("Could not resolve type hints of %r; treating them as Any", handler)
        return {}


__all__ = ["CallArgument", "Handler", "ToolAdapter", "ToolRegistry", "TypeSchema", "describe_error"]
