"""Unit tests for the tool registry, handler adapters and CallArgument."""

import asyncio
import json
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from threadloom.errors import DecodeError, ToolHandlerError, ToolNotFoundError, ToolTimeoutError
from threadloom.tools import CallArgument, ToolAdapter, ToolRegistry, TypeSchema
from threadloom.types import ToolCall


class WeatherQuery(BaseModel):
    city: str


class Weather(BaseModel):
    tempC: float


@dataclass
class Point:
    x: int
    y: int


async def get_weather(query: WeatherQuery) -> Weather:
    return Weather(tempC=21.5 if query.city == "Zurich" else 0.0)


class TestToolAdapter:
    async def test_typed_input_and_output(self):
        adapter = ToolAdapter("getWeather", get_weather)
        out = await adapter('{"city": "Zurich"}')
        assert json.loads(out) == {"tempC": 21.5}

    async def test_sync_handler(self):
        def add(p: Point) -> int:
            return p.x + p.y

        adapter = ToolAdapter("add", add)
        assert await adapter('{"x": 2, "y": 3}') == "5"

    async def test_void_handler_returns_none(self):
        seen = []

        async def record(q: WeatherQuery) -> None:
            seen.append(q.city)

        adapter = ToolAdapter("record", record)
        assert await adapter('{"city": "Bern"}') is None
        assert seen == ["Bern"]

    async def test_output_type_none_overrides_annotation(self):
        adapter = ToolAdapter("w", get_weather, output_type=None)
        assert await adapter('{"city": "Zurich"}') is None

    async def test_unannotated_handler_gets_plain_json(self):
        adapter = ToolAdapter("echo", lambda args: args["value"])
        assert await adapter('{"value": [1, 2]}') == "[1,2]"

    async def test_unannotated_handler_returning_none(self):
        adapter = ToolAdapter("noop", lambda args: None)
        assert await adapter("{}") is None

    async def test_handler_without_parameters_ignores_arguments(self):
        adapter = ToolAdapter("now", lambda: "noon")
        assert await adapter("not even json") == '"noon"'

    async def test_explicit_input_type(self):
        adapter = ToolAdapter("area", lambda p: p.x * p.y, input_type=Point, output_type=int)
        assert await adapter('{"x": 3, "y": 4}') == "12"

    async def test_call_argument_input(self):
        def raw(arg: CallArgument) -> str:
            return arg.decoded(WeatherQuery).city.upper()

        adapter = ToolAdapter("raw", raw)
        assert await adapter('{"city": "Zurich"}') == '"ZURICH"'

    async def test_malformed_json_raises_decode_error(self):
        adapter = ToolAdapter("getWeather", get_weather)
        with pytest.raises(DecodeError):
            await adapter("{city: Zurich")

    async def test_type_mismatch_raises_decode_error(self):
        adapter = ToolAdapter("getWeather", get_weather)
        with pytest.raises(DecodeError):
            await adapter('{"town": "Zurich"}')

    async def test_handler_exception_propagates(self):
        async def boom(q: WeatherQuery) -> Weather:
            raise RuntimeError("station offline")

        adapter = ToolAdapter("boom", boom)
        with pytest.raises(RuntimeError, match="station offline"):
            await adapter('{"city": "Zurich"}')


class TestCallArgument:
    def test_decoded_model(self):
        arg = CallArgument('{"city": "Basel"}')
        assert arg.decoded(WeatherQuery) == WeatherQuery(city="Basel")

    def test_decoded_any(self):
        assert CallArgument('{"a": 1}').decoded() == {"a": 1}

    def test_decoded_malformed(self):
        with pytest.raises(DecodeError):
            CallArgument("{").decoded(WeatherQuery)

    def test_decoded_type_mismatch(self):
        with pytest.raises(DecodeError):
            CallArgument('{"x": "one", "y": 2}').decoded(Point)


class TestTypeSchema:
    @pytest.mark.parametrize(
        "tp,value",
        [
            (Weather, Weather(tempC=-3.5)),
            (Point, Point(x=1, y=2)),
            (dict[str, list[int]], {"a": [1, 2], "b": []}),
            (str, "plain text"),
        ],
    )
    def test_output_round_trip(self, tp, value):
        schema = TypeSchema(tp)
        assert schema.parse(schema.dump(value)) == value


class TestToolRegistry:
    def test_register_and_get(self):
        registry = ToolRegistry()
        registry.register("getWeather", get_weather)
        assert "getWeather" in registry
        assert len(registry) == 1
        assert registry.get("getWeather").handler is get_weather
        assert registry.get("missing") is None
        assert registry.names() == ["getWeather"]

    async def test_reregistering_replaces_handler(self):
        registry = ToolRegistry()
        registry.register("t", lambda: "first")
        registry.register("t", lambda: "second")
        assert len(registry) == 1
        result = await registry.execute(ToolCall(id="c1", name="t", arguments="{}"))
        assert result.output == '"second"'

    async def test_execute_success(self):
        registry = ToolRegistry()
        registry.register("getWeather", get_weather)
        result = await registry.execute(ToolCall(id="c1", name="getWeather", arguments='{"city": "Zurich"}'))
        assert result.success
        assert result.tool_call_id == "c1"
        assert json.loads(result.output) == {"tempC": 21.5}

    async def test_execute_void_handler_gives_empty_output(self):
        registry = ToolRegistry()
        registry.register("noop", lambda q: None, output_type=None)
        result = await registry.execute(ToolCall(id="c1", name="noop", arguments="{}"))
        assert result.success
        assert result.output == ""

    async def test_execute_unknown_tool(self):
        result = await ToolRegistry().execute(ToolCall(id="c1", name="getWeather", arguments="{}"))
        assert result.output == "Tool getWeather not a known function"
        assert isinstance(result.error, ToolNotFoundError)

    async def test_execute_handler_error(self):
        registry = ToolRegistry()

        def fail(q: WeatherQuery) -> Weather:
            raise ValueError("no data for Atlantis")

        registry.register("getWeather", fail)
        result = await registry.execute(ToolCall(id="c1", name="getWeather", arguments='{"city": "Atlantis"}'))
        assert "no data for Atlantis" in result.output
        assert isinstance(result.error, ToolHandlerError)
        assert isinstance(result.error.cause, ValueError)

    async def test_execute_error_without_message(self):
        registry = ToolRegistry()

        def fail(q):
            raise KeyError

        registry.register("t", fail)
        result = await registry.execute(ToolCall(id="c1", name="t", arguments="{}"))
        assert result.output == "KeyError"

    async def test_execute_malformed_arguments(self):
        registry = ToolRegistry()
        registry.register("getWeather", get_weather)
        result = await registry.execute(ToolCall(id="c1", name="getWeather", arguments="{not json"))
        assert not result.success
        assert isinstance(result.error, DecodeError)
        assert "Invalid arguments" in result.output

    async def test_execute_timeout(self):
        registry = ToolRegistry()

        async def slow(q) -> str:
            await asyncio.sleep(1)
            return "late"

        registry.register("slow", slow)
        result = await registry.execute(ToolCall(id="c1", name="slow", arguments="{}"), timeout=0.01)
        assert isinstance(result.error, ToolTimeoutError)
        assert "timed out" in result.output

    @pytest.mark.parametrize("timeout", [None, 5.0])
    async def test_handler_raising_timeout_keeps_its_description(self, timeout):
        registry = ToolRegistry()

        def fetch(q):
            raise TimeoutError("weather API did not answer")

        registry.register("fetch", fetch)
        result = await registry.execute(ToolCall(id="c1", name="fetch", arguments="{}"), timeout=timeout)
        assert result.output == "weather API did not answer"
        assert isinstance(result.error, ToolHandlerError)
        assert isinstance(result.error.cause, TimeoutError)
        assert not isinstance(result.error, ToolTimeoutError)
