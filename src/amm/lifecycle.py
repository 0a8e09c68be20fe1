"""Pool Lifecycle — фаза пула по времени.

Переходы:
- UNINITIALIZED → ACTIVE: create_pool
- ACTIVE → ACTIVE_EXPIRED: now > maturity (свопы ещё разрешены в grace period)
- ACTIVE_EXPIRED → FROZEN: now > maturity + grace_period (свопы запрещены,
  allocate/remove разрешены)

Переходы монотонны по времени, возврата из FROZEN в ACTIVE нет.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.domain.calibration import Calibration, PoolPhase

# Grace period по умолчанию (секунды)
DEFAULT_GRACE_PERIOD = 120


@dataclass(frozen=True)
class PhaseResult:
    """Результат оценки фазы пула."""

    phase: PoolPhase
    swaps_allowed: bool
    liquidity_allowed: bool

    # Диагностика
    seconds_to_maturity: int
    reason: str


class PoolLifecycle:
    """Оценка фазы пула по калибровке и текущему времени.

    Args:
        grace_period: окно после maturity, в котором свопы ещё разрешены
    """

    def __init__(self, grace_period: int = DEFAULT_GRACE_PERIOD):
        if grace_period < 0:
            raise ValueError(f"grace_period must be non-negative, got {grace_period}")
        self.grace_period = grace_period

    def evaluate(self, calibration: Optional[Calibration], now: int) -> PhaseResult:
        """Фаза пула в момент now.

        Args:
            calibration: калибровка пула (None — пул не создан)
            now: текущее время (unix, секунды)
        """
        if calibration is None:
            return PhaseResult(
                phase=PoolPhase.UNINITIALIZED,
                swaps_allowed=False,
                liquidity_allowed=False,
                seconds_to_maturity=0,
                reason="pool_not_created",
            )

        seconds_to_maturity = calibration.maturity - now

        if now <= calibration.maturity:
            return PhaseResult(
                phase=PoolPhase.ACTIVE,
                swaps_allowed=True,
                liquidity_allowed=True,
                seconds_to_maturity=seconds_to_maturity,
                reason="before_maturity",
            )

        if now <= calibration.maturity + self.grace_period:
            return PhaseResult(
                phase=PoolPhase.ACTIVE_EXPIRED,
                swaps_allowed=True,
                liquidity_allowed=True,
                seconds_to_maturity=seconds_to_maturity,
                reason="within_grace_period",
            )

        return PhaseResult(
            phase=PoolPhase.FROZEN,
            swaps_allowed=False,
            liquidity_allowed=True,
            seconds_to_maturity=seconds_to_maturity,
            reason="grace_period_elapsed",
        )
