"""
Calibration — параметры торговой кривой пула

Immutable Pydantic модель, одна на пул. Единственное изменяемое поле —
last_accrual — меняется только через model_copy (новый экземпляр).

PoolId детерминированно выводится из идентификатора движка и полей
калибровки (strike, volatility, maturity, fee): два пула с одинаковыми
параметрами на одном движке имеют одинаковый PoolId.
"""

import hashlib
import json
from enum import Enum
from typing import Final

from pydantic import BaseModel, Field, model_validator

from src.core.math.fixed_point import BPS

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Допустимый диапазон волатильности (bps): 0.01% .. 100000%
MIN_VOLATILITY_BPS: Final[int] = 1
MAX_VOLATILITY_BPS: Final[int] = 10_000_000

# Максимальная комиссия (bps): 10%
MAX_FEE_BPS: Final[int] = 1_000


# =============================================================================
# ENUMS
# =============================================================================


class PoolPhase(str, Enum):
    """
    Фаза жизненного цикла пула.

    UNINITIALIZED → ACTIVE → ACTIVE_EXPIRED → FROZEN, только вперёд по времени.
    """

    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"
    ACTIVE_EXPIRED = "ACTIVE_EXPIRED"
    FROZEN = "FROZEN"


# =============================================================================
# CALIBRATION MODEL
# =============================================================================


class Calibration(BaseModel):
    """
    Калибровка пула.

    Immutable модель (frozen=True). Все изменения создают новый экземпляр.
    """

    strike: int = Field(..., gt=0, description="Страйк (WAD, base за 1 quote)")
    volatility: int = Field(
        ...,
        ge=MIN_VOLATILITY_BPS,
        le=MAX_VOLATILITY_BPS,
        description="Годовая волатильность (bps)",
    )
    maturity: int = Field(..., ge=0, description="Время экспирации (unix, секунды)")
    last_accrual: int = Field(
        ..., ge=0, description="Время последнего начисления (<= maturity)"
    )
    fee: int = Field(..., ge=0, le=MAX_FEE_BPS, description="Комиссия свопа (bps)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_accrual_before_maturity(self) -> "Calibration":
        """last_accrual никогда не превышает maturity."""
        if self.last_accrual > self.maturity:
            raise ValueError(
                f"last_accrual {self.last_accrual} exceeds maturity {self.maturity}"
            )
        return self

    @property
    def gamma(self) -> int:
        """Удерживаемая доля входа после комиссии (bps)."""
        return BPS - self.fee

    @property
    def tau(self) -> int:
        """Время до экспирации от last_accrual (секунды)."""
        return self.maturity - self.last_accrual

    def accrued(self, timestamp: int) -> "Calibration":
        """
        Новая калибровка с last_accrual = min(timestamp, maturity).

        last_accrual не убывает: более раннее время игнорируется.
        """
        clamped = min(max(timestamp, self.last_accrual), self.maturity)
        if clamped == self.last_accrual:
            return self
        return self.model_copy(update={"last_accrual": clamped})


# =============================================================================
# POOL ID
# =============================================================================


def derive_pool_id(
    engine_id: str,
    strike: int,
    volatility: int,
    maturity: int,
    fee: int,
) -> str:
    """
    Детерминированный идентификатор пула.

    sha256 от канонического JSON (sort_keys, без пробелов).

    Returns:
        hex-строка из 64 символов
    """
    payload = json.dumps(
        {
            "engine_id": engine_id,
            "strike": strike,
            "volatility": volatility,
            "maturity": maturity,
            "fee": fee,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
