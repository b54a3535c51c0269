"""Tests for the pydantic view models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from cpamm.models import PoolInfo, SwapDirection, SwapQuote
from cpamm.safe_int import UINT64_MAX
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C

POOL = "0x" + "dd" * 32


def _info(**overrides) -> PoolInfo:
    fields = {
        "address": POOL,
        "asset_a_id": TOKEN_A,
        "asset_b_id": TOKEN_B,
        "share_mint_id": TOKEN_C,
        "reserve_a": 1000,
        "reserve_b": 2000,
        "total_shares": 1414,
        "price_ratio": Decimal(2),
    }
    fields.update(overrides)
    return PoolInfo(**fields)


class TestPoolInfo:
    def test_identifiers_are_normalized(self):
        info = _info(address=POOL.upper().replace("0X", "0x"))
        assert info.address == POOL

    def test_rejects_bad_identifier(self):
        with pytest.raises(ValidationError):
            _info(asset_a_id="0x1234")

    def test_rejects_out_of_range_amounts(self):
        with pytest.raises(ValidationError):
            _info(reserve_a=-1)
        with pytest.raises(ValidationError):
            _info(total_shares=UINT64_MAX + 1)

    def test_is_frozen(self):
        info = _info()
        with pytest.raises(ValidationError):
            info.reserve_a = 5  # type: ignore[misc]

    def test_json_round_trip(self):
        info = _info(price_ratio=None)
        assert PoolInfo.model_validate_json(info.model_dump_json()) == info


class TestSwapQuote:
    def test_direction_from_string(self):
        quote = SwapQuote(
            pool=POOL,
            direction="b_to_a",
            amount_in=100,
            amount_out=90,
            fee_amount=0,
            price_impact_bps=1000,
            effective_price=Decimal("0.9"),
            minimum_received=89,
        )
        assert quote.direction is SwapDirection.B_TO_A
        assert quote.model_dump(mode="json")["direction"] == "b_to_a"


class TestSwapDirection:
    def test_values(self):
        assert SwapDirection("a_to_b") is SwapDirection.A_TO_B
        assert SwapDirection.A_TO_B.is_a_to_b
        assert not SwapDirection.B_TO_A.is_a_to_b

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            SwapDirection("sideways")
