"""
Core math modules для covered-call AMM

Детерминированная fixed-point арифметика, нормальное распределение
и инвариант репликации.
"""

# Fixed Point
from src.core.math.fixed_point import (
    BPS,
    MAX_UINT256,
    WAD,
    FixedPointError,
    check_unsigned,
    checked_add,
    checked_sub,
    div_wad_down,
    div_wad_up,
    from_wad,
    mul_div_down,
    mul_div_up,
    mul_wad_down,
    mul_wad_up,
    scale_down_down,
    scale_down_up,
    scale_factor_for,
    scale_up,
    to_wad_down,
    to_wad_up,
)

# Normal Distribution
from src.core.math.normal_distribution import (
    CDF_ERROR_BOUND,
    P_MIN,
    cdf_wad,
    inverse_cdf_wad,
    std_normal_cdf,
    std_normal_inverse_cdf,
    std_normal_pdf,
)

# Replication
from src.core.math.replication import (
    SECONDS_PER_YEAR,
    invariant,
    marginal_price,
    required_base_per_liquidity,
    solve_complementary_amount,
    volatility_sqrt_tau,
)

__all__ = [
    # Fixed Point: Constants
    "BPS",
    "MAX_UINT256",
    "WAD",
    # Fixed Point: Exceptions
    "FixedPointError",
    # Fixed Point: Functions
    "check_unsigned",
    "checked_add",
    "checked_sub",
    "div_wad_down",
    "div_wad_up",
    "from_wad",
    "mul_div_down",
    "mul_div_up",
    "mul_wad_down",
    "mul_wad_up",
    "scale_down_down",
    "scale_down_up",
    "scale_factor_for",
    "scale_up",
    "to_wad_down",
    "to_wad_up",
    # Normal Distribution
    "CDF_ERROR_BOUND",
    "P_MIN",
    "cdf_wad",
    "inverse_cdf_wad",
    "std_normal_cdf",
    "std_normal_inverse_cdf",
    "std_normal_pdf",
    # Replication
    "SECONDS_PER_YEAR",
    "invariant",
    "marginal_price",
    "required_base_per_liquidity",
    "solve_complementary_amount",
    "volatility_sqrt_tau",
]
