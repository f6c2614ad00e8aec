from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import DomainError

# Slack so that e.g. 2.5 years * 2 still counts as 5 whole periods under float error.
_PERIOD_EPS = 1e-9


def period_count(years: float, frequency: int) -> int:
    """Whole coupon periods to maturity (years * frequency, truncated)."""
    return int(years * frequency + _PERIOD_EPS)

@dataclass(frozen=True)
class BondParameters:
    """
    Fixed-coupon bond inputs for one valuation snapshot.

    coupon_rate and ytm are annual percentages (6.0 == 6%), years is the term to maturity
    and frequency the number of coupon payments per year.
    """
    face_value: float
    coupon_rate: float
    ytm: float
    years: float
    frequency: int = 2

    def __post_init__(self):
        for name in ("face_value", "coupon_rate", "ytm", "years", "frequency"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite.")
        if self.face_value <= 0:
            raise ValueError("face_value must be positive.")
        if self.years <= 0:
            raise ValueError("years must be positive.")
        if self.frequency <= 0 or int(self.frequency) != self.frequency:
            raise ValueError("frequency must be a positive integer.")
        object.__setattr__(self, "frequency", int(self.frequency))
        if self.periods < 1:
            raise ValueError("Term is shorter than one payment period.")

    @property
    def periods(self) -> int:
        return period_count(self.years, self.frequency)


@dataclass(frozen=True)
class PriceComponents:
    price: float
    pv_coupons: float
    pv_face_value: float
    periodic_coupon: float
    periodic_yield: float
    periods: int


def discount_factors(periodic_yield: float, periods: int) -> np.ndarray:
    """
    Returns (1 + y)^-t for t = 0..periods.

    Raises DomainError when 1 + y == 0 (undefined) or any factor overflows.
    """
    base = 1.0 + periodic_yield
    if base == 0.0:
        raise DomainError(
            f"Periodic yield of {periodic_yield:.2%} leaves the discount factor undefined."
        )

    t = np.arange(0, periods + 1, dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        dfs = np.power(base, -t)

    if not np.all(np.isfinite(dfs)):
        raise DomainError(f"Discount factors overflow at periodic yield {periodic_yield:.6g}.")
    return dfs


def price_bond(params: BondParameters) -> PriceComponents:
    """
    Present value of a fixed-coupon bond at a flat yield.

      pv_coupons = sum_{t=1..n} C / (1 + y)^t
      pv_face    = F / (1 + y)^n
      price      = pv_coupons + pv_face
    """
    periods = params.periods
    periodic_coupon_rate = params.coupon_rate / 100.0 / params.frequency
    periodic_yield = params.ytm / 100.0 / params.frequency
    periodic_coupon = params.face_value * periodic_coupon_rate

    dfs = discount_factors(periodic_yield, periods)

    pv_coupons = float(np.sum(periodic_coupon * dfs[1:]))
    pv_face_value = float(params.face_value * dfs[periods])
    price = pv_coupons + pv_face_value

    if not math.isfinite(price):
        raise DomainError("Bond price is not finite.")

    return PriceComponents(
        price=price,
        pv_coupons=pv_coupons,
        pv_face_value=pv_face_value,
        periodic_coupon=periodic_coupon,
        periodic_yield=periodic_yield,
        periods=periods,
    )
