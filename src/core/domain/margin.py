"""
MarginBalance — средства владельца, хранимые движком вне пулов

Immutable Pydantic модель. Ключ — owner. Не привязана к пулу.
"""

from pydantic import BaseModel, Field

from src.core.math.fixed_point import checked_add


class MarginBalance(BaseModel):
    """
    Маржинальный баланс владельца.

    Immutable модель (frozen=True).
    """

    owner: str = Field(..., min_length=1, description="Владелец баланса")
    quote: int = Field(default=0, ge=0, description="Баланс quote")
    base: int = Field(default=0, ge=0, description="Баланс base")

    model_config = {"frozen": True}

    def credited(self, delta_quote: int, delta_base: int) -> "MarginBalance":
        """Зачисление."""
        return self.model_copy(
            update={
                "quote": checked_add(self.quote, delta_quote),
                "base": checked_add(self.base, delta_base),
            }
        )

    def debited(self, delta_quote: int, delta_base: int) -> "MarginBalance":
        """
        Списание.

        Raises:
            ValueError: если любой из балансов ушёл бы в минус
        """
        if delta_quote > self.quote or delta_base > self.base:
            raise ValueError(
                f"debit ({delta_quote}, {delta_base}) exceeds margin "
                f"({self.quote}, {self.base}) of {self.owner}"
            )
        return self.model_copy(
            update={"quote": self.quote - delta_quote, "base": self.base - delta_base}
        )

    @property
    def is_empty(self) -> bool:
        return self.quote == 0 and self.base == 0
