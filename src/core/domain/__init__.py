"""
Domain models and value objects.

Contains pool calibration, reserve state, liquidity positions,
margin balances and engine events.
"""

from src.core.domain.calibration import (
    MAX_FEE_BPS,
    MAX_VOLATILITY_BPS,
    MIN_VOLATILITY_BPS,
    Calibration,
    PoolPhase,
    derive_pool_id,
)
from src.core.domain.events import (
    AccrueTimeEvent,
    AllocateEvent,
    CreateEvent,
    DepositEvent,
    EngineEvent,
    EventType,
    RemoveEvent,
    SwapEvent,
    WithdrawEvent,
)
from src.core.domain.margin import MarginBalance
from src.core.domain.position import LiquidityPosition
from src.core.domain.reserve import ReserveState

__all__ = [
    # Calibration
    "MAX_FEE_BPS",
    "MAX_VOLATILITY_BPS",
    "MIN_VOLATILITY_BPS",
    "Calibration",
    "PoolPhase",
    "derive_pool_id",
    # Reserve
    "ReserveState",
    # Position
    "LiquidityPosition",
    # Margin
    "MarginBalance",
    # Events
    "EventType",
    "EngineEvent",
    "CreateEvent",
    "DepositEvent",
    "WithdrawEvent",
    "AllocateEvent",
    "RemoveEvent",
    "SwapEvent",
    "AccrueTimeEvent",
]
