"""
Fixed Point — детерминированная WAD-арифметика

Все суммы движка — целые числа (int) в нативных единицах токена.
Нормированные величины (per-liquidity резервы, страйк, вероятности Φ)
хранятся как целые, масштабированные на WAD = 10**18.

Модуль обеспечивает:
- Умножение/деление с явным направлением округления (down/up)
- Масштабирование между decimals токена и WAD
- Проверку диапазона (256 бит) и отрицательных результатов

ПРАВИЛО ОКРУГЛЕНИЯ:
- round-down для сумм, которые пул выдаёт наружу (liquidity, выплаты)
- round-up для сумм, которые вызывающий должен движку

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль → FixedPointError (наследник ArithmeticError)
2. Результат вне [-MAX_UINT256, MAX_UINT256] → FixedPointError
3. Все операции детерминированы и воспроизводимы
"""

from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Единица нормированной величины (1.0 == WAD)
WAD: Final[int] = 10**18

# Базисные пункты (100% == BPS)
BPS: Final[int] = 10_000

# Верхняя граница представимых значений
MAX_UINT256: Final[int] = 2**256 - 1

# Максимальные decimals токена, поддерживаемые масштабированием в WAD
MAX_TOKEN_DECIMALS: Final[int] = 18


# =============================================================================
# EXCEPTIONS
# =============================================================================


class FixedPointError(ArithmeticError):
    """
    Ошибка fixed-point арифметики: деление на ноль, переполнение,
    отрицательный результат беззнаковой операции.
    """

    pass


# =============================================================================
# ПРОВЕРКИ ДИАПАЗОНА
# =============================================================================


def check_bounds(value: int, name: str = "value") -> int:
    """
    Проверка, что значение помещается в 256 бит (по модулю).

    Raises:
        FixedPointError: если |value| > MAX_UINT256
    """
    if abs(value) > MAX_UINT256:
        raise FixedPointError(f"{name} overflow: {value}")
    return value


def check_unsigned(value: int, name: str = "value") -> int:
    """
    Проверка беззнакового значения: 0 <= value <= MAX_UINT256.

    Raises:
        FixedPointError: если value < 0 или переполнение
    """
    if value < 0:
        raise FixedPointError(f"{name} underflow: {value}")
    return check_bounds(value, name)


def checked_add(a: int, b: int, name: str = "sum") -> int:
    """Беззнаковое сложение с проверкой переполнения."""
    return check_unsigned(a + b, name)


def checked_sub(a: int, b: int, name: str = "difference") -> int:
    """
    Беззнаковое вычитание.

    Raises:
        FixedPointError: если b > a
    """
    return check_unsigned(a - b, name)


# =============================================================================
# УМНОЖЕНИЕ / ДЕЛЕНИЕ С ОКРУГЛЕНИЕМ
# =============================================================================


def mul_div_down(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator).

    Для отрицательных результатов округление идёт к -inf (floor),
    т.е. всегда "вниз" по числовой оси.

    Raises:
        FixedPointError: при denominator == 0 или переполнении

    Examples:
        >>> mul_div_down(10, 3, 4)
        7
        >>> mul_div_down(-10, 3, 4)
        -8
    """
    if denominator == 0:
        raise FixedPointError("division by zero")
    return check_bounds((a * b) // denominator, "mul_div_down")


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """
    ceil(a * b / denominator).

    Examples:
        >>> mul_div_up(10, 3, 4)
        8
        >>> mul_div_up(8, 1, 4)
        2
    """
    if denominator == 0:
        raise FixedPointError("division by zero")
    return check_bounds(-((-a * b) // denominator), "mul_div_up")


def mul_wad_down(a: int, b: int) -> int:
    """a * b / WAD с округлением вниз."""
    return mul_div_down(a, b, WAD)


def mul_wad_up(a: int, b: int) -> int:
    """a * b / WAD с округлением вверх."""
    return mul_div_up(a, b, WAD)


def div_wad_down(a: int, b: int) -> int:
    """a * WAD / b с округлением вниз."""
    return mul_div_down(a, WAD, b)


def div_wad_up(a: int, b: int) -> int:
    """a * WAD / b с округлением вверх."""
    return mul_div_up(a, WAD, b)


# =============================================================================
# МАСШТАБИРОВАНИЕ DECIMALS ↔ WAD
# =============================================================================


def scale_factor_for(decimals: int) -> int:
    """
    Множитель перевода нативных единиц токена в WAD.

    Raises:
        ValueError: если decimals вне [0, 18]

    Examples:
        >>> scale_factor_for(18)
        1
        >>> scale_factor_for(6)
        1000000000000
    """
    if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(
            f"decimals must be in [0, {MAX_TOKEN_DECIMALS}], got {decimals}"
        )
    return 10 ** (MAX_TOKEN_DECIMALS - decimals)


def scale_up(amount: int, scale_factor: int) -> int:
    """Нативные единицы → WAD (точно, без округления)."""
    return check_bounds(amount * scale_factor, "scale_up")


def scale_down_down(value: int, scale_factor: int) -> int:
    """WAD → нативные единицы, округление вниз."""
    return mul_div_down(value, 1, scale_factor)


def scale_down_up(value: int, scale_factor: int) -> int:
    """WAD → нативные единицы, округление вверх."""
    return mul_div_up(value, 1, scale_factor)


# =============================================================================
# FLOAT ↔ WAD
# =============================================================================


def to_wad_down(value: float) -> int:
    """
    float → WAD с округлением вниз.

    Используется только на границе с трансцендентными функциями
    (Φ, Φ⁻¹, sqrt), где float-вычисление является частью аппроксимации.
    """
    return int(value * WAD // 1)


def to_wad_up(value: float) -> int:
    """float → WAD с округлением вверх."""
    return -int(-value * WAD // 1)


def from_wad(value: int) -> float:
    """
    WAD → float.

    Examples:
        >>> from_wad(WAD // 2)
        0.5
    """
    return value / WAD


def bps_to_wad(bps: int) -> int:
    """
    Basis points → WAD.

    Examples:
        >>> bps_to_wad(8000) == 8 * WAD // 10
        True
    """
    return mul_div_down(bps, WAD, BPS)
