"""
Engine Events — уведомления о завершённых операциях движка

Immutable Pydantic модели. Публикуются только после успешного завершения
операции (при откате не публикуются).
Совместимы с JSON Schema (contracts/schema/engine_event.json, swap_event.json).
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class EventType(str, Enum):
    """Тип события движка."""

    CREATE = "CREATE"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    ALLOCATE = "ALLOCATE"
    REMOVE = "REMOVE"
    SWAP = "SWAP"
    ACCRUE_TIME = "ACCRUE_TIME"


# =============================================================================
# BASE
# =============================================================================


class EngineEvent(BaseModel):
    """Общие поля всех событий."""

    event_type: EventType = Field(..., description="Тип события")
    engine_id: str = Field(..., min_length=1, description="Идентификатор движка")
    timestamp: int = Field(..., ge=0, description="Время операции (unix, секунды)")

    model_config = {"frozen": True}


# =============================================================================
# EVENTS
# =============================================================================


class CreateEvent(EngineEvent):
    """Создание пула."""

    event_type: EventType = EventType.CREATE
    owner: str = Field(..., min_length=1)
    pool_id: str = Field(..., min_length=1)
    strike: int = Field(..., gt=0)
    volatility: int = Field(..., gt=0)
    maturity: int = Field(..., ge=0)
    fee: int = Field(..., ge=0)
    delta_quote: int = Field(..., ge=0)
    delta_base: int = Field(..., ge=0)
    delta_liquidity: int = Field(..., ge=0, description="Ликвидность владельца (без burned)")


class DepositEvent(EngineEvent):
    """Зачисление на маржинальный баланс."""

    event_type: EventType = EventType.DEPOSIT
    owner: str = Field(..., min_length=1)
    delta_quote: int = Field(..., ge=0)
    delta_base: int = Field(..., ge=0)


class WithdrawEvent(EngineEvent):
    """Вывод с маржинального баланса."""

    event_type: EventType = EventType.WITHDRAW
    owner: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    delta_quote: int = Field(..., ge=0)
    delta_base: int = Field(..., ge=0)


class AllocateEvent(EngineEvent):
    """Добавление ликвидности."""

    event_type: EventType = EventType.ALLOCATE
    owner: str = Field(..., min_length=1)
    pool_id: str = Field(..., min_length=1)
    delta_quote: int = Field(..., ge=0)
    delta_base: int = Field(..., ge=0)
    delta_liquidity: int = Field(..., gt=0)
    from_margin: bool = False


class RemoveEvent(EngineEvent):
    """Изъятие ликвидности (выручка зачислена на маржу)."""

    event_type: EventType = EventType.REMOVE
    owner: str = Field(..., min_length=1)
    pool_id: str = Field(..., min_length=1)
    delta_quote: int = Field(..., ge=0)
    delta_base: int = Field(..., ge=0)
    delta_liquidity: int = Field(..., gt=0)


class SwapEvent(EngineEvent):
    """Своп с полной детализацией."""

    event_type: EventType = EventType.SWAP
    owner: str = Field(..., min_length=1, description="Плательщик входа")
    recipient: str = Field(..., min_length=1, description="Получатель выхода")
    pool_id: str = Field(..., min_length=1)
    quote_for_base: bool = Field(..., description="True: вход quote, выход base")
    delta_in: int = Field(..., gt=0)
    delta_in_effective: int = Field(..., ge=0, description="Вход после комиссии")
    delta_out: int = Field(..., gt=0)
    from_margin: bool = False
    to_margin: bool = False
    invariant_before: int = Field(..., description="I до свопа (WAD)")
    invariant_after: int = Field(..., description="I после свопа (WAD)")
    last_accrual: int = Field(..., ge=0)


class AccrueTimeEvent(EngineEvent):
    """Продвижение last_accrual пула."""

    event_type: EventType = EventType.ACCRUE_TIME
    pool_id: str = Field(..., min_length=1)
    last_accrual: int = Field(..., ge=0)
