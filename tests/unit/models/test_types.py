"""Tests for identifier and amount helpers."""

import pytest

from cpamm.errors import ArithmeticOverflow, InvalidAmount
from cpamm.models.types import (
    bytes_to_id,
    id_to_bytes,
    is_valid_id,
    normalize_id,
    require_u64,
)
from cpamm.safe_int import UINT64_MAX
from tests.helpers import TOKEN_A


class TestIdentifiers:
    """Tests for 32-byte hex identifiers."""

    def test_is_valid_id(self):
        assert is_valid_id(TOKEN_A)
        assert is_valid_id(TOKEN_A.replace("aa", "AA"))
        assert not is_valid_id(TOKEN_A[2:])
        assert not is_valid_id("0x1234")
        assert not is_valid_id(None)

    def test_normalize_id(self):
        assert normalize_id("0x" + "AB" * 32) == "0x" + "ab" * 32
        assert normalize_id("ab" * 32) == "0x" + "ab" * 32

    def test_normalize_id_validates_on_request(self):
        assert normalize_id("0x12") == "0x12"
        with pytest.raises(ValueError):
            normalize_id("0x12", validate=True)

    def test_bytes_conversion(self):
        raw = id_to_bytes(TOKEN_A)
        assert raw == b"\xaa" * 32
        assert bytes_to_id(raw) == TOKEN_A

    def test_bytes_to_id_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            bytes_to_id(b"\x00" * 31)


class TestRequireU64:
    """Tests for caller amount validation."""

    def test_valid(self):
        assert require_u64("amount", 1) == 1
        assert require_u64("amount", UINT64_MAX) == UINT64_MAX

    def test_zero(self):
        with pytest.raises(InvalidAmount):
            require_u64("amount", 0)
        assert require_u64("min_out", 0, allow_zero=True) == 0

    def test_negative(self):
        with pytest.raises(InvalidAmount):
            require_u64("min_out", -1, allow_zero=True)

    def test_above_u64(self):
        with pytest.raises(ArithmeticOverflow):
            require_u64("amount", UINT64_MAX + 1)

    @pytest.mark.parametrize("value", [1.0, "1", True, None])
    def test_wrong_type(self, value):
        with pytest.raises(TypeError):
            require_u64("amount", value)

    def test_error_names_parameter(self):
        with pytest.raises(InvalidAmount) as exc_info:
            require_u64("amount_a", 0)
        assert "amount_a" in str(exc_info.value)
        assert str(exc_info.value).startswith("Invalid amount provided")
