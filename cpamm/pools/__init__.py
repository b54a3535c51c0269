"""Pool registry and derivation."""

from cpamm.pools.registry import PoolRegistry

__all__ = ["PoolRegistry"]
