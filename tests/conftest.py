"""Pytest configuration and fixtures."""

import pytest

from cpamm.ledger.memory import InMemoryLedger
from cpamm.models.pool import Pool
from cpamm.program import AmmProgram
from tests.helpers import ALICE, TOKEN_A, TOKEN_B, fund, make_pool


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def program(ledger: InMemoryLedger) -> AmmProgram:
    """Program over the `ledger` fixture with default configuration."""
    return AmmProgram(ledger=ledger)


@pytest.fixture
def pool(program: AmmProgram) -> Pool:
    """Empty TOKEN_A / TOKEN_B pool."""
    _, pool = make_pool(program=program)
    return pool


@pytest.fixture
def seeded_pool(program: AmmProgram, pool: Pool) -> Pool:
    """Pool holding (1000, 1000) with 1000 shares owned by ALICE."""
    fund(program, ALICE, TOKEN_A, 1000)
    fund(program, ALICE, TOKEN_B, 1000)
    program.deposit(pool, ALICE, 1000, 1000, min_shares=1000)
    return pool
