"""Constant-product pool accounting core."""

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.models import Pool, SwapDirection
from cpamm.program import AmmProgram

__version__ = "0.1.0"
__all__ = [
    "AmmProgram",
    "Pool",
    "SwapDirection",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "__version__",
]
