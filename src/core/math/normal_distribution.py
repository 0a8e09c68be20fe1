"""
Normal Distribution — Φ(x) и Φ⁻¹(p) с ограниченной ошибкой

Стандартное нормальное распределение для инварианта репликации:
- Φ(x) через erfc (без зависимости от scipy)
- Φ⁻¹(p) через рациональную аппроксимацию Acklam + один шаг Halley
- WAD-обёртки для целочисленного движка

ГРАНИЦЫ ОШИБКИ (в нормированных единицах):
- |Φ(x) - Φ_exact(x)| <= CDF_ERROR_BOUND
- |Φ(Φ⁻¹(p)) - p| <= CDF_ERROR_BOUND для p в [P_MIN, 1 - P_MIN]
  (верхний хвост WAD-обёртки считается через дополнение 1 - p)

Рациональная аппроксимация без уточнения даёт относительную ошибку ~1.15e-9;
шаг Halley доводит её до машинной точности double.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Обе функции тотальны: Φ⁻¹ клампит p к открытому интервалу (0, 1)
2. Обе функции монотонно неубывающие
3. NaN на входе → ValueError (никогда не пропагирует в движок)
"""

import math
from typing import Final

from src.core.math.fixed_point import WAD, from_wad, to_wad_down, to_wad_up

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Гарантированная абсолютная ошибка Φ и Φ⁻¹ (нормированные единицы)
CDF_ERROR_BOUND: Final[float] = 1e-9

# Минимальная вероятность для Φ⁻¹ (1 wei в WAD)
P_MIN: Final[float] = 1e-18

# Максимальная представимая в double вероятность меньше 1
_P_MAX: Final[float] = 1.0 - 2.0**-53

# Порог перехода между центральной и хвостовой аппроксимацией
_P_LOW: Final[float] = 0.02425

_SQRT2: Final[float] = math.sqrt(2.0)
_SQRT_2PI: Final[float] = math.sqrt(2.0 * math.pi)

# Коэффициенты Acklam
_A: Final[tuple[float, ...]] = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B: Final[tuple[float, ...]] = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_C: Final[tuple[float, ...]] = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D: Final[tuple[float, ...]] = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)


# =============================================================================
# FLOAT-ЯДРО
# =============================================================================


def std_normal_pdf(x: float) -> float:
    """Плотность стандартного нормального распределения φ(x)."""
    return math.exp(-0.5 * x * x) / _SQRT_2PI


def std_normal_cdf(x: float) -> float:
    """
    Φ(x) = 0.5 * erfc(-x / sqrt(2)).

    erfc вместо 1 + erf сохраняет точность в левом хвосте.

    Raises:
        ValueError: если x — NaN

    Examples:
        >>> std_normal_cdf(0.0)
        0.5
        >>> round(std_normal_cdf(1.96), 4)
        0.975
    """
    if math.isnan(x):
        raise ValueError("std_normal_cdf got NaN")
    return 0.5 * math.erfc(-x / _SQRT2)


def _acklam(p: float) -> float:
    """Начальное приближение Φ⁻¹(p) (ошибка ~1.15e-9)."""
    if p < _P_LOW:
        q = math.sqrt(-2.0 * math.log(p))
        return (
            ((((_C[0] * q + _C[1]) * q + _C[2]) * q + _C[3]) * q + _C[4]) * q + _C[5]
        ) / ((((_D[0] * q + _D[1]) * q + _D[2]) * q + _D[3]) * q + 1.0)

    if p <= 1.0 - _P_LOW:
        q = p - 0.5
        r = q * q
        return (
            (((((_A[0] * r + _A[1]) * r + _A[2]) * r + _A[3]) * r + _A[4]) * r + _A[5])
            * q
            / (((((_B[0] * r + _B[1]) * r + _B[2]) * r + _B[3]) * r + _B[4]) * r + 1.0)
        )

    q = math.sqrt(-2.0 * math.log1p(-p))
    return -(
        ((((_C[0] * q + _C[1]) * q + _C[2]) * q + _C[3]) * q + _C[4]) * q + _C[5]
    ) / ((((_D[0] * q + _D[1]) * q + _D[2]) * q + _D[3]) * q + 1.0)


def std_normal_inverse_cdf(p: float) -> float:
    """
    Φ⁻¹(p): квантиль стандартного нормального распределения.

    Тотальная функция: p клампится в [P_MIN, 1 - 2**-53], поэтому
    Φ⁻¹(0) и Φ⁻¹(1) возвращают конечные значения.

    Args:
        p: Вероятность

    Returns:
        x такой, что Φ(x) ≈ p

    Raises:
        ValueError: если p — NaN

    Examples:
        >>> std_normal_inverse_cdf(0.5)
        0.0
        >>> round(std_normal_inverse_cdf(0.975), 6)
        1.959964
    """
    if math.isnan(p):
        raise ValueError("std_normal_inverse_cdf got NaN")

    p = min(max(p, P_MIN), _P_MAX)
    if p == 0.5:
        return 0.0

    x = _acklam(p)

    # Halley: x ← x - u / (1 + x*u/2), u = (Φ(x) - p) / φ(x)
    e = std_normal_cdf(x) - p
    u = e * _SQRT_2PI * math.exp(0.5 * x * x)
    return x - u / (1.0 + 0.5 * x * u)


# =============================================================================
# WAD-ОБЁРТКИ
# =============================================================================


def cdf_wad(x_wad: int, round_up: bool = False) -> int:
    """
    Φ для WAD-аргумента, результат в WAD.

    Args:
        x_wad: Аргумент в WAD
        round_up: Округлять вверх (по умолчанию вниз)

    Returns:
        Φ(x) в WAD, всегда в [0, WAD]
    """
    phi = std_normal_cdf(from_wad(x_wad))
    value = to_wad_up(phi) if round_up else to_wad_down(phi)
    return min(max(value, 0), WAD)


def inverse_cdf_wad(p_wad: int) -> int:
    """
    Φ⁻¹ для вероятности в WAD, результат в WAD (округление вниз).

    p_wad вне [0, WAD] клампится к границам. Для p > 1/2 используется
    симметрия Φ⁻¹(p) = -Φ⁻¹(1 - p): дополнение вычисляется точно в целых.
    """
    p_wad = min(max(p_wad, 0), WAD)
    if 2 * p_wad > WAD:
        return to_wad_down(-std_normal_inverse_cdf(from_wad(WAD - p_wad)))
    return to_wad_down(std_normal_inverse_cdf(from_wad(p_wad)))
