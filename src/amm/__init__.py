"""AMM — covered-call движок поверх core-примитивов.

- MarketEngine: атомарные операции create_pool / deposit / withdraw /
  allocate / remove / swap / accrue_time
- PoolRegistry / ReserveLedger / MarginAccount: хранилища состояния
- ReentrancyGuard: единственный примитив конкурентности
- Settlement: внешний реестр активов и платёжные callback
"""

from .clock import Clock, ManualClock, SystemClock
from .engine import CreateResult, EngineConfig, MarketEngine
from .errors import (
    BalanceShortfall,
    DuplicatePool,
    EngineError,
    InsufficientLiquidity,
    InsufficientMargin,
    InvalidCalibration,
    InvariantViolation,
    PoolExpired,
    Reentrant,
    Uninitialized,
    ZeroInput,
    ZeroLiquidity,
    ZeroOutput,
)
from .guard import ReentrancyGuard
from .ledger import ReserveLedger
from .lifecycle import PhaseResult, PoolLifecycle
from .margin import MarginAccount
from .registry import PoolRegistry
from .settlement import (
    AssetLedger,
    InMemoryAssetLedger,
    LedgerTransferError,
    PayFromAccount,
    SettlementCallback,
    SettlementRequest,
)

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "CreateResult",
    "EngineConfig",
    "MarketEngine",
    "BalanceShortfall",
    "DuplicatePool",
    "EngineError",
    "InsufficientLiquidity",
    "InsufficientMargin",
    "InvalidCalibration",
    "InvariantViolation",
    "PoolExpired",
    "Reentrant",
    "Uninitialized",
    "ZeroInput",
    "ZeroLiquidity",
    "ZeroOutput",
    "ReentrancyGuard",
    "ReserveLedger",
    "PhaseResult",
    "PoolLifecycle",
    "MarginAccount",
    "PoolRegistry",
    "AssetLedger",
    "InMemoryAssetLedger",
    "LedgerTransferError",
    "PayFromAccount",
    "SettlementCallback",
    "SettlementRequest",
]
