"""
Reentrancy Guard — единственный примитив конкурентности движка.

Захватывается в начале каждой мутирующей операции и освобождается на любом
выходе (успех или исключение). Повторный вход во время занятости → Reentrant.
"""

from contextlib import contextmanager
from typing import Iterator

from src.amm.errors import Reentrant


class ReentrancyGuard:
    """
    Scoped guard.

    Использование:
        with guard.hold("swap"):
            ...
    """

    def __init__(self) -> None:
        self._operation: str | None = None

    @property
    def busy(self) -> bool:
        return self._operation is not None

    @property
    def operation(self) -> str | None:
        """Имя операции, удерживающей guard."""
        return self._operation

    @contextmanager
    def hold(self, operation: str) -> Iterator["ReentrancyGuard"]:
        """
        Удержание guard на время операции.

        Raises:
            Reentrant: если guard уже занят
        """
        if self._operation is not None:
            raise Reentrant(
                f"{operation} re-entered while {self._operation} is in progress"
            )
        self._operation = operation
        try:
            yield self
        finally:
            self._operation = None
