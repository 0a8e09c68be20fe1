"""
JSON Schema контракты движка: события и снапшоты пулов.
"""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    EngineEventValidator,
    PoolSnapshotValidator,
    SchemaLoader,
    SwapEventValidator,
    validate_engine_event,
    validate_pool_snapshot,
    validate_swap_event,
)

__all__ = [
    "SCHEMA_DIR",
    "SchemaLoader",
    "ContractValidator",
    "EngineEventValidator",
    "SwapEventValidator",
    "PoolSnapshotValidator",
    "validate_engine_event",
    "validate_swap_event",
    "validate_pool_snapshot",
]
