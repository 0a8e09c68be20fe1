"""
LiquidityPosition — доля владельца в ликвидности пула

Immutable Pydantic модель. Ключ (owner, pool_id). Создаётся при первом
allocate, никогда не удаляется: после полного remove остаётся с нулём.

Сумма liquidity всех позиций пула = liquidity_supply - MIN_LIQUIDITY.
"""

from pydantic import BaseModel, Field

from src.core.math.fixed_point import checked_add


class LiquidityPosition(BaseModel):
    """
    Позиция ликвидности.

    Immutable модель (frozen=True) для предотвращения случайных изменений.
    Все изменения позиции создают новый экземпляр.
    """

    owner: str = Field(..., min_length=1, description="Владелец позиции")
    pool_id: str = Field(..., min_length=1, description="Идентификатор пула")
    liquidity: int = Field(default=0, ge=0, description="Ликвидность владельца")

    model_config = {"frozen": True}

    def allocated(self, delta_liquidity: int) -> "LiquidityPosition":
        """Увеличение позиции."""
        return self.model_copy(
            update={"liquidity": checked_add(self.liquidity, delta_liquidity)}
        )

    def removed(self, delta_liquidity: int) -> "LiquidityPosition":
        """
        Уменьшение позиции.

        Raises:
            ValueError: если delta_liquidity превышает позицию
        """
        if delta_liquidity > self.liquidity:
            raise ValueError(
                f"delta_liquidity {delta_liquidity} exceeds position {self.liquidity}"
            )
        return self.model_copy(update={"liquidity": self.liquidity - delta_liquidity})
