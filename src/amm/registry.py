"""
PoolRegistry — хранилище калибровок и резервов пулов по PoolId.

Калибровка и резервы создаются атомарно и никогда не удаляются.
Записи — immutable модели; изменение = замена записи в словаре.
"""

import logging
from typing import Dict, Iterator, Tuple

from src.amm.errors import DuplicatePool, Uninitialized
from src.core.domain.calibration import Calibration
from src.core.domain.reserve import ReserveState
from src.core.math.fixed_point import WAD, mul_div_down, scale_up
from src.core.math.replication import invariant, marginal_price

logger = logging.getLogger(__name__)


class PoolRegistry:
    """
    Реестр пулов одного движка.

    Args:
        quote_scale: Множитель quote → WAD
        base_scale: Множитель base → WAD
    """

    def __init__(self, quote_scale: int = 1, base_scale: int = 1):
        self.quote_scale = quote_scale
        self.base_scale = base_scale
        self._calibrations: Dict[str, Calibration] = {}
        self._reserves: Dict[str, ReserveState] = {}

    # -------------------------------------------------------------------------
    # Хранилище
    # -------------------------------------------------------------------------

    def __contains__(self, pool_id: str) -> bool:
        return pool_id in self._calibrations

    def __len__(self) -> int:
        return len(self._calibrations)

    def pool_ids(self) -> Iterator[str]:
        return iter(self._calibrations)

    def create(
        self, pool_id: str, calibration: Calibration, reserve: ReserveState
    ) -> None:
        """
        Атомарная запись калибровки и резервов нового пула.

        Raises:
            DuplicatePool: если pool_id уже существует
        """
        if pool_id in self._calibrations:
            raise DuplicatePool(f"Pool {pool_id} already exists")
        self._calibrations[pool_id] = calibration
        self._reserves[pool_id] = reserve
        logger.debug(f"Pool {pool_id[:12]} registered: {calibration}")

    def calibration(self, pool_id: str) -> Calibration:
        """
        Raises:
            Uninitialized: если пул не создавался
        """
        try:
            return self._calibrations[pool_id]
        except KeyError:
            raise Uninitialized(f"Pool {pool_id} is not initialized") from None

    def reserve(self, pool_id: str) -> ReserveState:
        """
        Raises:
            Uninitialized: если пул не создавался
        """
        try:
            return self._reserves[pool_id]
        except KeyError:
            raise Uninitialized(f"Pool {pool_id} is not initialized") from None

    def put_reserve(self, pool_id: str, reserve: ReserveState) -> None:
        self.reserve(pool_id)
        self._reserves[pool_id] = reserve

    def accrue(self, pool_id: str, timestamp: int) -> int:
        """
        Продвижение last_accrual к min(timestamp, maturity).

        Обновляет калибровку и зеркало в резервах.

        Returns:
            Новый last_accrual (монотонно не убывает)

        Raises:
            Uninitialized: если пул не создавался
        """
        calibration = self.calibration(pool_id).accrued(timestamp)
        self._calibrations[pool_id] = calibration
        self._reserves[pool_id] = self.reserve(pool_id).with_accrual(
            calibration.last_accrual
        )
        return calibration.last_accrual

    def snapshot(self) -> Tuple[Dict[str, Calibration], Dict[str, ReserveState]]:
        return dict(self._calibrations), dict(self._reserves)

    def restore(
        self, snapshot: Tuple[Dict[str, Calibration], Dict[str, ReserveState]]
    ) -> None:
        calibrations, reserves = snapshot
        self._calibrations = dict(calibrations)
        self._reserves = dict(reserves)

    # -------------------------------------------------------------------------
    # Производные величины
    # -------------------------------------------------------------------------

    def per_liquidity(
        self, reserve_quote: int, reserve_base: int, liquidity: int
    ) -> Tuple[int, int]:
        """
        Резервы на единицу ликвидности в WAD (округление вниз).

        Returns:
            (quote_per_l, base_per_l)

        Raises:
            FixedPointError: если liquidity == 0
        """
        quote_per_l = mul_div_down(scale_up(reserve_quote, self.quote_scale), WAD, liquidity)
        base_per_l = mul_div_down(scale_up(reserve_base, self.base_scale), WAD, liquidity)
        return quote_per_l, base_per_l

    def invariant_of(self, pool_id: str) -> int:
        """
        Текущий инвариант пула при сохранённом last_accrual.

        Returns:
            I в WAD
        """
        calibration = self.calibration(pool_id)
        reserve = self.reserve(pool_id)
        quote_per_l, base_per_l = self.per_liquidity(
            reserve.reserve_quote, reserve.reserve_base, reserve.liquidity_supply
        )
        return invariant(
            base_per_l,
            quote_per_l,
            calibration.strike,
            calibration.volatility,
            calibration.tau,
        )

    def spot_price_of(self, pool_id: str) -> int:
        """Маржинальная цена quote в base (WAD)."""
        calibration = self.calibration(pool_id)
        reserve = self.reserve(pool_id)
        quote_per_l, _ = self.per_liquidity(
            reserve.reserve_quote, reserve.reserve_base, reserve.liquidity_supply
        )
        return marginal_price(
            quote_per_l, calibration.strike, calibration.volatility, calibration.tau
        )
