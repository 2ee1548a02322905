"""Chain tables and chain correction operators"""

from .chain_config import ChainLink, ChainTable, HumanChainConfig, build_chain_table
from .additive import (
    AxisAdditive,
    ChainTwistAdditive,
    corrections_from_config,
    apply_corrections,
)

__all__ = [
    "ChainLink", "ChainTable", "HumanChainConfig", "build_chain_table",
    "AxisAdditive", "ChainTwistAdditive",
    "corrections_from_config", "apply_corrections",
]
