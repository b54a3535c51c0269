"""Test helpers."""

from tests.helpers.constants import ALICE, BOB, CAROL, PROGRAM_ID, TOKEN_A, TOKEN_B, TOKEN_C
from tests.helpers.factories import balance, fund, make_pool, make_program

__all__ = [
    "ALICE",
    "BOB",
    "CAROL",
    "PROGRAM_ID",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "balance",
    "fund",
    "make_pool",
    "make_program",
]
