"""Tests for QueryEngine, the jq adapter."""

from __future__ import annotations

import json

import pytest

from jq_view.engine import QueryEngine, execute
from jq_view.errors import JqViewError, QueryError


@pytest.fixture
def engine() -> QueryEngine:
    return QueryEngine()


class TestExecute:
    def test_single_result_is_unwrapped(self, engine: QueryEngine) -> None:
        assert engine.execute("{a: .a}", b'{"a": 1, "b": 2}') == '{\n  "a": 1\n}'

    def test_several_results_become_a_list(self, engine: QueryEngine) -> None:
        assert json.loads(engine.execute(".[]", "[1, 2]")) == [1, 2]

    def test_no_result_is_empty_list(self, engine: QueryEngine) -> None:
        # zero outputs render as an empty list, not null
        assert engine.execute("empty", "{}") == "[]"

    def test_identity(self, engine: QueryEngine) -> None:
        doc = {"a": [1, {"b": None}], "c": "ü"}
        assert json.loads(engine.execute(".", json.dumps(doc))) == doc

    def test_non_ascii_kept(self, engine: QueryEngine) -> None:
        assert engine.execute(".", '"ü"') == '"ü"'

    def test_module_function(self) -> None:
        assert execute(".a", '{"a": true}') == "true"


class TestErrors:
    def test_parse_error(self, engine: QueryEngine) -> None:
        with pytest.raises(QueryError, match="^parse error:"):
            engine.execute("{a:", "{}")

    def test_json_error(self, engine: QueryEngine) -> None:
        with pytest.raises(QueryError, match="^json error:"):
            engine.execute(".", b"{not json")

    def test_runtime_error(self, engine: QueryEngine) -> None:
        with pytest.raises(QueryError):
            engine.execute(".a.b", '{"a": 5}')

    def test_errors_share_a_base(self) -> None:
        assert issubclass(QueryError, JqViewError)


class TestCache:
    def test_compiled_programs_are_reused(self, engine: QueryEngine) -> None:
        first = engine.compile(".a")
        assert engine.compile(".a") is first
        assert engine.cache_size == 1

    def test_bounded(self) -> None:
        engine = QueryEngine(max_cache_size=2)
        for expression in (".a", ".b", ".c"):
            engine.compile(expression)
        assert engine.cache_size == 2

    def test_failed_compile_not_cached(self, engine: QueryEngine) -> None:
        with pytest.raises(QueryError):
            engine.compile("{")
        assert engine.cache_size == 0

    def test_instances_do_not_share(self) -> None:
        first, second = QueryEngine(), QueryEngine()
        first.compile(".a")
        assert second.cache_size == 0

    def test_run_on_parsed_value(self, engine: QueryEngine) -> None:
        assert engine.run(".[] | .x", [{"x": 1}, {"x": 2}]) == [1, 2]
