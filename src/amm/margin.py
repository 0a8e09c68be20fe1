"""
MarginAccount — балансы quote/base владельцев, хранимые движком вне пулов.

Позволяет батчить депозиты и выводы, избегая лишних внешних переводов.
Балансы создаются лениво и остаются в хранилище после обнуления.
"""

import logging
from typing import Dict, List

from src.amm.errors import InsufficientMargin
from src.core.domain.margin import MarginBalance

logger = logging.getLogger(__name__)


class MarginAccount:
    """Хранилище маржинальных балансов owner → MarginBalance."""

    def __init__(self) -> None:
        self._balances: Dict[str, MarginBalance] = {}

    def balance_of(self, owner: str) -> MarginBalance:
        """Баланс владельца (нулевой, если ещё не создан)."""
        return self._balances.get(owner, MarginBalance(owner=owner))

    def credit(self, owner: str, delta_quote: int, delta_base: int) -> MarginBalance:
        """Зачисление на баланс."""
        balance = self.balance_of(owner).credited(delta_quote, delta_base)
        self._balances[owner] = balance
        logger.debug(f"Margin credit {owner}: +({delta_quote}, {delta_base})")
        return balance

    def debit(self, owner: str, delta_quote: int, delta_base: int) -> MarginBalance:
        """
        Списание с баланса.

        Raises:
            InsufficientMargin: если баланс ушёл бы в минус
        """
        try:
            balance = self.balance_of(owner).debited(delta_quote, delta_base)
        except ValueError as e:
            raise InsufficientMargin(str(e)) from e
        self._balances[owner] = balance
        logger.debug(f"Margin debit {owner}: -({delta_quote}, {delta_base})")
        return balance

    def owners(self) -> List[str]:
        return list(self._balances)

    def snapshot(self) -> Dict[str, MarginBalance]:
        return dict(self._balances)

    def restore(self, snapshot: Dict[str, MarginBalance]) -> None:
        self._balances = dict(snapshot)
