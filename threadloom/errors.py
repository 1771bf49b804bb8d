"""Structured error hierarchy for runs, transports and tools."""

from __future__ import annotations


class ThreadloomError(Exception):
    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause


class TransportError(ThreadloomError):
    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__("TRANSPORT_ERROR", message, cause)
        self.operation = operation
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"{self.operation}: {self.args[0]}"
        return f"{self.operation}: {self.args[0]} (status={self.status_code})"


class DecodeError(ThreadloomError):
    def __init__(self, message: str, payload: str | None = None, cause: Exception | None = None) -> None:
        super().__init__("DECODE_ERROR", message, cause)
        self.payload = payload


class StreamTimeoutError(ThreadloomError):
    def __init__(self, timeout: float) -> None:
        super().__init__("STREAM_TIMEOUT", f"No stream event received within {timeout}s")
        self.timeout = timeout


class ToolError(ThreadloomError):
    def __init__(
        self, code: str, tool_name: str, message: str, cause: Exception | None = None
    ) -> None:
        super().__init__(code, message, cause)
        self.tool_name = tool_name


class ToolNotFoundError(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__("TOOL_NOT_FOUND", tool_name, f"Tool {tool_name} not a known function")


class ToolHandlerError(ToolError):
    def __init__(self, tool_name: str, cause: Exception) -> None:
        super().__init__("TOOL_HANDLER_ERROR", tool_name, str(cause), cause)


class ToolTimeoutError(ToolError):
    def __init__(self, tool_name: str, timeout: float) -> None:
        super().__init__(
            "TOOL_TIMEOUT", tool_name, f'Tool "{tool_name}" timed out after {timeout}s'
        )
        self.timeout = timeout
