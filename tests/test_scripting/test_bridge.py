"""Tests for the host/guest value bridge."""

from __future__ import annotations

import pytest

from kota.exceptions import ConversionError, ConversionErrorKind
from kota.scripting import ScriptSession, to_guest, to_host


def roundtrip(session: ScriptSession, value: object) -> object:
    return to_host(to_guest(session, value))


class TestScalars:
    @pytest.mark.parametrize(
        "value", [None, True, False, 0, -7, 2**40, 1.5, -0.25, "", "héllo"]
    )
    def test_scalar_roundtrip(self, session: ScriptSession, value: object) -> None:
        assert roundtrip(session, value) == value

    def test_integer_and_float_are_distinguished(self, session: ScriptSession) -> None:
        math_type = session.execute("return function(v) return math.type(v) end")
        assert session.call(math_type, to_guest(session, 5)) == b"integer"
        assert session.call(math_type, to_guest(session, 5.0)) == b"float"

        assert type(roundtrip(session, 5)) is int
        assert type(roundtrip(session, 5.0)) is float

    def test_guest_arithmetic_keeps_integers(self, session: ScriptSession) -> None:
        assert to_host(session.execute("return 5 + 3")) == 8
        assert type(to_host(session.execute("return 5 + 3"))) is int
        assert to_host(session.execute("return 7 / 2")) == 3.5

    def test_oversized_integer_falls_back_to_float(self, session: ScriptSession) -> None:
        value = to_guest(session, 2**70)
        assert isinstance(value, float)
        assert value == float(2**70)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected_to_guest(
        self, session: ScriptSession, value: float
    ) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_guest(session, value)
        assert exc_info.value.kind is ConversionErrorKind.NON_FINITE

    @pytest.mark.parametrize("source", ["return 0/0", "return math.huge", "return -math.huge"])
    def test_non_finite_rejected_to_host(self, session: ScriptSession, source: str) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_host(session.execute(source))
        assert exc_info.value.kind is ConversionErrorKind.NON_FINITE


class TestContainers:
    def test_nested_document_roundtrip(self, session: ScriptSession) -> None:
        document = {
            "name": "report",
            "tags": ["a", "b", "c"],
            "stats": {"count": 3, "ratio": 0.5, "ok": True},
            "rows": [[1, 2], [3, 4]],
        }
        assert roundtrip(session, document) == document

    def test_array_becomes_one_based_table(self, session: ScriptSession) -> None:
        inspect = session.execute(
            "return function(t) return #t, t[1], t[3] end"
        )
        assert session.call(inspect, to_guest(session, ["x", "y", "z"])) == 3

        first = session.execute("return function(t) return t[1] end")
        assert session.call(first, to_guest(session, ["x", "y"])) == b"x"

    def test_empty_array_comes_back_as_empty_map(self, session: ScriptSession) -> None:
        # Lua cannot tell an empty array from an empty map.
        assert roundtrip(session, []) == {}
        assert roundtrip(session, {"items": []}) == {"items": {}}

    def test_empty_map_roundtrip(self, session: ScriptSession) -> None:
        assert roundtrip(session, {}) == {}

    def test_non_string_map_key_rejected(self, session: ScriptSession) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_guest(session, {1: "a"})
        assert exc_info.value.kind is ConversionErrorKind.UNSUPPORTED_KEY

    def test_unsupported_type_rejected(self, session: ScriptSession) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_guest(session, {"items": {1, 2}})
        assert exc_info.value.kind is ConversionErrorKind.UNSUPPORTED_TYPE


class TestDisambiguation:
    def test_dense_keys_become_array(self, session: ScriptSession) -> None:
        value = session.execute("return {[1] = 'a', [2] = 'b', [3] = 'c'}")
        assert to_host(value) == ["a", "b", "c"]

    def test_gap_becomes_map_with_string_keys(self, session: ScriptSession) -> None:
        value = session.execute("return {[1] = 'a', [2] = 'b', [4] = 'd'}")
        assert to_host(value) == {"1": "a", "2": "b", "4": "d"}

    def test_string_keys_become_map(self, session: ScriptSession) -> None:
        value = session.execute("return {a = 1, b = 2}")
        assert to_host(value) == {"a": 1, "b": 2}

    def test_mixed_keys_become_map(self, session: ScriptSession) -> None:
        value = session.execute("return {'x', 'y', n = 2}")
        assert to_host(value) == {"1": "x", "2": "y", "n": 2}

    def test_non_positive_keys_become_map(self, session: ScriptSession) -> None:
        value = session.execute("return {[0] = 'zero', [1] = 'one'}")
        assert to_host(value) == {"0": "zero", "1": "one"}

    def test_empty_table_is_map(self, session: ScriptSession) -> None:
        assert to_host(session.execute("return {}")) == {}

    def test_unsupported_keys_are_dropped(self, session: ScriptSession) -> None:
        value = session.execute("return {[true] = 1, [1.5] = 2, name = 'x'}")
        assert to_host(value) == {"name": "x"}

    def test_functions_convert_to_null(self, session: ScriptSession) -> None:
        value = session.execute("return {f = function() end, n = 1}")
        assert to_host(value) == {"f": None, "n": 1}


class TestDepthLimit:
    def test_cyclic_table_is_too_deep(self, session: ScriptSession) -> None:
        value = session.execute("local t = {} t.self = t return t")
        with pytest.raises(ConversionError) as exc_info:
            to_host(value)
        assert exc_info.value.kind is ConversionErrorKind.TOO_DEEP

    def test_deep_host_value_is_too_deep(self, session: ScriptSession) -> None:
        value: list = []
        for _ in range(100):
            value = [value]
        with pytest.raises(ConversionError) as exc_info:
            to_guest(session, value)
        assert exc_info.value.kind is ConversionErrorKind.TOO_DEEP

    def test_custom_depth_limit(self, session: ScriptSession) -> None:
        value = session.execute("return {a = {b = {c = 1}}}")
        assert to_host(value, max_depth=3) == {"a": {"b": {"c": 1}}}
        with pytest.raises(ConversionError):
            to_host(value, max_depth=2)


class TestSizeLimit:
    def test_shared_subtables_are_expanded(self, session: ScriptSession) -> None:
        value = session.execute("local leaf = {1} return {a = leaf, b = leaf}")
        assert to_host(value) == {"a": [1], "b": [1]}

    def test_exponential_sharing_is_too_large(self, session: ScriptSession) -> None:
        value = session.execute(
            "local t = {} for i = 1, 60 do t = {t, t} end return t"
        )
        with pytest.raises(ConversionError) as exc_info:
            to_host(value, max_nodes=1000)
        assert exc_info.value.kind is ConversionErrorKind.TOO_LARGE

    def test_host_node_limit(self, session: ScriptSession) -> None:
        row = list(range(10))
        with pytest.raises(ConversionError) as exc_info:
            to_guest(session, [row] * 10, max_nodes=50)
        assert exc_info.value.kind is ConversionErrorKind.TOO_LARGE
        assert to_host(to_guest(session, [row] * 2, max_nodes=50)) == [row, row]
