"""
Engine Errors — виды ошибок движка

Все ошибки fail-fast: операция прерывается, все изменения внутри неё
откатываются целиком. Движок не делает повторных попыток.

Арифметические ошибки fixed-point модуля (FixedPointError) наследуют
встроенный ArithmeticError и пробрасываются без обёртки.
"""


class EngineError(Exception):
    """Базовая ошибка движка."""

    pass


class InvalidCalibration(EngineError, ValueError):
    """strike / volatility / fee / quote_per_liquidity вне допустимого диапазона."""

    pass


class DuplicatePool(EngineError):
    """Пул с такой калибровкой уже создан на этом движке."""

    pass


class PoolExpired(EngineError):
    """Создание пула после maturity или своп после maturity + grace period."""

    pass


class Uninitialized(EngineError):
    """Операция над пулом, который не создавался."""

    pass


class ZeroInput(EngineError, ValueError):
    """Нулевая входная сумма."""

    pass


class ZeroOutput(EngineError, ValueError):
    """Нулевая выходная сумма."""

    pass


class ZeroLiquidity(EngineError, ValueError):
    """Вырожденная ликвидность (ноль или ниже минимального порога)."""

    pass


class InsufficientLiquidity(EngineError):
    """Изъятие больше, чем позиция владельца."""

    pass


class InsufficientMargin(EngineError):
    """Списание больше, чем маржинальный баланс владельца."""

    pass


class InvariantViolation(EngineError):
    """
    Своп уменьшил бы инвариант репликации сильнее допуска.

    Attributes:
        invariant_before: I до свопа (WAD)
        invariant_after: I после свопа (WAD)
    """

    def __init__(self, invariant_before: int, invariant_after: int):
        self.invariant_before = invariant_before
        self.invariant_after = invariant_after
        super().__init__(
            f"Invariant decreased: before={invariant_before}, after={invariant_after}"
        )


class BalanceShortfall(EngineError):
    """
    Settlement callback не доставил обещанную сумму.

    Attributes:
        asset: Актив
        expected: Ожидаемый баланс движка
        observed: Фактический баланс движка
    """

    def __init__(self, asset: str, expected: int, observed: int):
        self.asset = asset
        self.expected = expected
        self.observed = observed
        super().__init__(
            f"Balance shortfall for {asset}: expected >= {expected}, observed {observed}"
        )


class Reentrant(EngineError):
    """Повторный вход в мутирующую операцию во время выполнения другой."""

    pass
