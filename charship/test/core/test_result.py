"""Tests for charship.core.result module."""

import pytest

from charship.core.result import Err, Ok, Result


class TestOk:
    """Tests for Ok type."""

    def test_map(self) -> None:
        """Ok.map() transforms the value."""
        assert Ok(" sig\n").map(str.strip) == Ok("sig")

    def test_repr(self) -> None:
        assert repr(Ok("x")) == "Ok('x')"

    def test_frozen(self) -> None:
        result = Ok(42)
        with pytest.raises(AttributeError):
            result.value = 0  # type: ignore[misc]


class TestErr:
    """Tests for Err type."""

    def test_map_is_noop(self) -> None:
        assert Err("boom").map(str.strip) == Err("boom")

    def test_equality(self) -> None:
        assert Err("a") == Err("a")
        assert Err("a") != Ok("a")


def test_pattern_matching() -> None:
    result: Result[int, str] = Err("no")
    match result:
        case Ok(value):
            pytest.fail(f"unexpected Ok({value})")
        case Err(error):
            assert error == "no"
