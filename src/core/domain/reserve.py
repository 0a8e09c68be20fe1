"""
ReserveState — резервы и ликвидность пула

Immutable Pydantic модель. Резервы и ликвидность меняются только через
allocate / remove / swap, каждая операция возвращает новый экземпляр.

Перед каждой мутацией накапливаются time-weighted аккумуляторы:
    cumulative_x += reserve_x * (timestamp - last_update)
"""

from pydantic import BaseModel, Field

from src.core.math.fixed_point import checked_add, checked_sub


class ReserveState(BaseModel):
    """
    Состояние резервов пула.

    Immutable модель (frozen=True).
    """

    # Резервы (нативные единицы токенов)
    reserve_quote: int = Field(..., ge=0, description="Резерв quote")
    reserve_base: int = Field(..., ge=0, description="Резерв base")
    liquidity_supply: int = Field(..., ge=0, description="Общая ликвидность пула")

    # Время
    last_accrual: int = Field(
        ..., ge=0, description="Зеркало Calibration.last_accrual (<= maturity)"
    )
    last_update: int = Field(
        ..., ge=0, description="Время последнего изменения резервов (без клампа)"
    )

    # Аккумуляторы
    cumulative_quote: int = Field(default=0, ge=0, description="Σ reserve_quote * dt")
    cumulative_base: int = Field(default=0, ge=0, description="Σ reserve_base * dt")
    cumulative_liquidity: int = Field(
        default=0, ge=0, description="Σ liquidity_supply * dt"
    )

    model_config = {"frozen": True}

    def accumulated(self, timestamp: int) -> "ReserveState":
        """Накопление аккумуляторов до timestamp (без изменения резервов)."""
        elapsed = timestamp - self.last_update
        if elapsed <= 0:
            return self
        return self.model_copy(
            update={
                "cumulative_quote": self.cumulative_quote + self.reserve_quote * elapsed,
                "cumulative_base": self.cumulative_base + self.reserve_base * elapsed,
                "cumulative_liquidity": self.cumulative_liquidity
                + self.liquidity_supply * elapsed,
                "last_update": timestamp,
            }
        )

    def with_accrual(self, last_accrual: int) -> "ReserveState":
        """Синхронизация last_accrual с калибровкой."""
        return self.model_copy(update={"last_accrual": last_accrual})

    def allocated(
        self,
        delta_quote: int,
        delta_base: int,
        delta_liquidity: int,
        timestamp: int,
    ) -> "ReserveState":
        """Увеличение резервов и ликвидности."""
        state = self.accumulated(timestamp)
        return state.model_copy(
            update={
                "reserve_quote": checked_add(state.reserve_quote, delta_quote),
                "reserve_base": checked_add(state.reserve_base, delta_base),
                "liquidity_supply": checked_add(state.liquidity_supply, delta_liquidity),
            }
        )

    def removed(
        self,
        delta_quote: int,
        delta_base: int,
        delta_liquidity: int,
        timestamp: int,
    ) -> "ReserveState":
        """
        Уменьшение резервов и ликвидности.

        Raises:
            FixedPointError: если резерв или ликвидность ушли бы в минус
        """
        state = self.accumulated(timestamp)
        return state.model_copy(
            update={
                "reserve_quote": checked_sub(
                    state.reserve_quote, delta_quote, "reserve_quote"
                ),
                "reserve_base": checked_sub(state.reserve_base, delta_base, "reserve_base"),
                "liquidity_supply": checked_sub(
                    state.liquidity_supply, delta_liquidity, "liquidity_supply"
                ),
            }
        )

    def swapped(
        self,
        quote_for_base: bool,
        delta_in: int,
        delta_out: int,
        timestamp: int,
    ) -> "ReserveState":
        """
        Своп: вход целиком (включая комиссию) остаётся в пуле.

        Raises:
            FixedPointError: если delta_out превышает резерв
        """
        state = self.accumulated(timestamp)
        if quote_for_base:
            update = {
                "reserve_quote": checked_add(state.reserve_quote, delta_in),
                "reserve_base": checked_sub(state.reserve_base, delta_out, "reserve_base"),
            }
        else:
            update = {
                "reserve_base": checked_add(state.reserve_base, delta_in),
                "reserve_quote": checked_sub(
                    state.reserve_quote, delta_out, "reserve_quote"
                ),
            }
        return state.model_copy(update=update)
