"""
ReserveLedger — мутации резервов и ликвидности одного пула.

allocate / remove / swap поверх хранилища PoolRegistry, плюс позиции
ликвидности (owner, pool_id) → LiquidityPosition.

ПРОПОРЦИОНАЛЬНОСТЬ:
- allocate минтит min(dq·L/Rq, db·L/Rb), округление вниз
- remove выдаёт dl·Rx/L по каждому активу, округление вниз
Оба направления округляются в пользу пула, поэтому резервы на единицу
ликвидности не уменьшаются.
"""

import logging
from typing import Dict, Tuple

from src.amm.errors import InsufficientLiquidity, ZeroInput, ZeroLiquidity
from src.amm.registry import PoolRegistry
from src.core.domain.position import LiquidityPosition
from src.core.math.fixed_point import mul_div_down

logger = logging.getLogger(__name__)


class ReserveLedger:
    """Мутатор резервов поверх PoolRegistry."""

    def __init__(self, registry: PoolRegistry):
        self.registry = registry
        self._positions: Dict[Tuple[str, str], LiquidityPosition] = {}

    # -------------------------------------------------------------------------
    # Позиции
    # -------------------------------------------------------------------------

    def position(self, owner: str, pool_id: str) -> LiquidityPosition:
        """Позиция владельца (нулевая, если ещё не создана)."""
        return self._positions.get(
            (owner, pool_id), LiquidityPosition(owner=owner, pool_id=pool_id)
        )

    def credit_position(self, owner: str, pool_id: str, delta_liquidity: int) -> None:
        self._positions[(owner, pool_id)] = self.position(owner, pool_id).allocated(
            delta_liquidity
        )

    def total_positions(self, pool_id: str) -> int:
        """Сумма ликвидности всех владельцев пула."""
        return sum(
            position.liquidity
            for (_, position_pool), position in self._positions.items()
            if position_pool == pool_id
        )

    # -------------------------------------------------------------------------
    # Мутации
    # -------------------------------------------------------------------------

    def liquidity_for(self, pool_id: str, delta_quote: int, delta_base: int) -> int:
        """
        Ликвидность за депозит: min по двум сторонам, округление вниз.

        Raises:
            Uninitialized: если пул не создавался
        """
        reserve = self.registry.reserve(pool_id)
        liquidity_quote = mul_div_down(
            delta_quote, reserve.liquidity_supply, reserve.reserve_quote
        )
        liquidity_base = mul_div_down(
            delta_base, reserve.liquidity_supply, reserve.reserve_base
        )
        return min(liquidity_quote, liquidity_base)

    def amounts_for(self, pool_id: str, delta_liquidity: int) -> Tuple[int, int]:
        """Пропорциональная доля резервов, округление вниз."""
        reserve = self.registry.reserve(pool_id)
        delta_quote = mul_div_down(
            delta_liquidity, reserve.reserve_quote, reserve.liquidity_supply
        )
        delta_base = mul_div_down(
            delta_liquidity, reserve.reserve_base, reserve.liquidity_supply
        )
        return delta_quote, delta_base

    def allocate(
        self,
        pool_id: str,
        owner: str,
        delta_quote: int,
        delta_base: int,
        timestamp: int,
    ) -> int:
        """
        Добавление ликвидности.

        Резервы растут на запрошенные суммы целиком; излишек сверх
        пропорции остаётся в пуле как пожертвование.

        Returns:
            Начисленная ликвидность

        Raises:
            ZeroInput: если любая из сумм нулевая
            Uninitialized: если пул не создавался
            ZeroLiquidity: если ликвидность округлилась до нуля
        """
        if delta_quote <= 0 or delta_base <= 0:
            raise ZeroInput(
                f"allocate requires both deltas > 0, got ({delta_quote}, {delta_base})"
            )

        delta_liquidity = self.liquidity_for(pool_id, delta_quote, delta_base)
        if delta_liquidity == 0:
            raise ZeroLiquidity(
                f"allocate ({delta_quote}, {delta_base}) mints zero liquidity"
            )

        reserve = self.registry.reserve(pool_id)
        self.registry.put_reserve(
            pool_id, reserve.allocated(delta_quote, delta_base, delta_liquidity, timestamp)
        )
        self.credit_position(owner, pool_id, delta_liquidity)
        logger.debug(
            f"Allocate {pool_id[:12]}: owner={owner} dq={delta_quote} db={delta_base} "
            f"dl={delta_liquidity}"
        )
        return delta_liquidity

    def remove(
        self,
        pool_id: str,
        owner: str,
        delta_liquidity: int,
        timestamp: int,
    ) -> Tuple[int, int]:
        """
        Изъятие ликвидности.

        Returns:
            (delta_quote, delta_base) — доля резервов, округлённая вниз

        Raises:
            ZeroLiquidity: если delta_liquidity <= 0
            Uninitialized: если пул не создавался
            InsufficientLiquidity: если delta_liquidity больше позиции
        """
        if delta_liquidity <= 0:
            raise ZeroLiquidity(f"remove requires delta_liquidity > 0, got {delta_liquidity}")

        reserve = self.registry.reserve(pool_id)
        position = self.position(owner, pool_id)
        if delta_liquidity > position.liquidity:
            raise InsufficientLiquidity(
                f"{owner} holds {position.liquidity} liquidity in {pool_id[:12]}, "
                f"cannot remove {delta_liquidity}"
            )

        delta_quote, delta_base = self.amounts_for(pool_id, delta_liquidity)
        self.registry.put_reserve(
            pool_id, reserve.removed(delta_quote, delta_base, delta_liquidity, timestamp)
        )
        self._positions[(owner, pool_id)] = position.removed(delta_liquidity)
        logger.debug(
            f"Remove {pool_id[:12]}: owner={owner} dl={delta_liquidity} "
            f"dq={delta_quote} db={delta_base}"
        )
        return delta_quote, delta_base

    def swap(
        self,
        pool_id: str,
        quote_for_base: bool,
        delta_in: int,
        delta_out: int,
        timestamp: int,
    ) -> None:
        """Фиксация свопа в резервах (проверка инварианта — на стороне движка)."""
        reserve = self.registry.reserve(pool_id)
        self.registry.put_reserve(
            pool_id, reserve.swapped(quote_for_base, delta_in, delta_out, timestamp)
        )

    # -------------------------------------------------------------------------
    # Откат
    # -------------------------------------------------------------------------

    def snapshot(self) -> Dict[Tuple[str, str], LiquidityPosition]:
        return dict(self._positions)

    def restore(self, snapshot: Dict[Tuple[str, str], LiquidityPosition]) -> None:
        self._positions = dict(snapshot)
