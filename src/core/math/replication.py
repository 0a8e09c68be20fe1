"""
Replication — инвариант covered-call репликации

Чистые функции торговой кривой пула. Все величины в WAD, кроме
volatility (basis points) и tau (секунды).

ФОРМУЛЫ:
    σ√τ       = (volatility / BPS) * sqrt(tau / SECONDS_PER_YEAR)
    base_req  = strike * Φ( Φ⁻¹(1 - quote_per_l) - σ√τ )
    I         = base_per_l - base_req

    quote_req = 1 - Φ( Φ⁻¹(base_per_l / strike) + σ√τ )

    price     = strike * exp(z * σ√τ - (σ√τ)² / 2),  z = Φ⁻¹(1 - quote_per_l)

На кривой I == 0. I > 0 — у пула избыток base относительно кривой.
При tau = 0 кривая вырождается во внутреннюю стоимость:
    base_req = strike * (1 - quote_per_l)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. base_req монотонно не возрастает по quote_per_l
2. I монотонно не убывает по base_per_l и по quote_per_l
3. Округление всегда в пользу пула (base_req и quote_req — вверх)
"""

import math
from typing import Final

from src.core.math.fixed_point import (
    BPS,
    WAD,
    div_wad_down,
    from_wad,
    mul_wad_up,
    to_wad_down,
)
from src.core.math.normal_distribution import cdf_wad, inverse_cdf_wad

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Длина года в секундах (365.2425 дней)
SECONDS_PER_YEAR: Final[int] = 31_556_952


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ
# =============================================================================


def volatility_sqrt_tau(volatility: int, tau: int) -> int:
    """
    σ√τ в WAD (округление вниз).

    Args:
        volatility: Годовая волатильность в basis points (8000 == 80%)
        tau: Время до экспирации в секундах (отрицательное трактуется как 0)

    Returns:
        σ√τ в WAD
    """
    if tau <= 0 or volatility <= 0:
        return 0
    sigma = volatility / BPS
    return to_wad_down(sigma * math.sqrt(tau / SECONDS_PER_YEAR))


# =============================================================================
# ИНВАРИАНТ
# =============================================================================


def required_base_per_liquidity(
    quote_per_l: int,
    strike: int,
    volatility: int,
    tau: int,
) -> int:
    """
    Количество base на единицу ликвидности, лежащее на кривой.

    base_req = strike * Φ(Φ⁻¹(1 - quote_per_l) - σ√τ), округление вверх.

    Граничные случаи:
    - quote_per_l >= 1 → 0
    - quote_per_l <= 0 → strike

    Args:
        quote_per_l: Резерв quote на единицу ликвидности (WAD, в [0, 1])
        strike: Страйк (WAD)
        volatility: Волатильность (bps)
        tau: Время до экспирации (секунды)

    Returns:
        base_req в WAD
    """
    if quote_per_l >= WAD:
        return 0
    if quote_per_l <= 0:
        return strike

    x = inverse_cdf_wad(WAD - quote_per_l) - volatility_sqrt_tau(volatility, tau)
    return mul_wad_up(strike, cdf_wad(x, round_up=True))


def invariant(
    base_per_l: int,
    quote_per_l: int,
    strike: int,
    volatility: int,
    tau: int,
) -> int:
    """
    Инвариант репликации I = base_per_l - base_req(quote_per_l).

    Args:
        base_per_l: Резерв base на единицу ликвидности (WAD)
        quote_per_l: Резерв quote на единицу ликвидности (WAD)
        strike: Страйк (WAD)
        volatility: Волатильность (bps)
        tau: Время до экспирации (секунды)

    Returns:
        I в WAD (со знаком)

    Examples:
        >>> invariant(WAD // 2, WAD // 2, WAD, 0, 0)
        0
    """
    return base_per_l - required_base_per_liquidity(quote_per_l, strike, volatility, tau)


def solve_complementary_amount(
    known_per_l: int,
    strike: int,
    volatility: int,
    tau: int,
    solving_for_base: bool,
) -> int:
    """
    Решение I = 0 относительно второго резерва.

    solving_for_base=True: known_per_l — quote на единицу ликвидности,
    результат — base_req. Иначе known_per_l — base, результат — quote_req.
    Оба результата округлены вверх (пул получает не меньше кривой).

    Args:
        known_per_l: Известный резерв на единицу ликвидности (WAD)
        strike: Страйк (WAD)
        volatility: Волатильность (bps)
        tau: Время до экспирации (секунды)
        solving_for_base: Направление решения

    Returns:
        Второй резерв на единицу ликвидности (WAD)
    """
    if solving_for_base:
        return required_base_per_liquidity(known_per_l, strike, volatility, tau)

    if known_per_l >= strike:
        return 0
    if known_per_l <= 0:
        return WAD

    x = inverse_cdf_wad(div_wad_down(known_per_l, strike)) + volatility_sqrt_tau(
        volatility, tau
    )
    return WAD - cdf_wad(x)


def marginal_price(
    quote_per_l: int,
    strike: int,
    volatility: int,
    tau: int,
) -> int:
    """
    Маржинальная цена quote в единицах base: -d(base_req)/d(quote_per_l).

    price = strike * exp(z * σ√τ - (σ√τ)² / 2), z = Φ⁻¹(1 - quote_per_l).
    При tau = 0 цена равна страйку.

    Returns:
        Цена в WAD (округление вниз)
    """
    v = from_wad(volatility_sqrt_tau(volatility, tau))
    if v == 0.0:
        return strike
    z = from_wad(inverse_cdf_wad(WAD - quote_per_l))
    return to_wad_down(from_wad(strike) * math.exp(z * v - 0.5 * v * v))
