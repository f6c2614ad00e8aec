from __future__ import annotations

from dataclasses import replace

import numpy as np
from scipy.optimize import brentq

from .pricing import BondParameters, price_bond, discount_factors


def _price_at(params: BondParameters, ytm: float) -> float:
    return price_bond(replace(params, ytm=ytm)).price


def yield_from_price(
    target_price: float,
    face_value: float,
    coupon_rate: float,
    years: float,
    frequency: int = 2,
    lo: float = -50.0,
    hi: float = 1000.0,
) -> float:
    """
    Yield to maturity (annual, percent) that reprices the bond to target_price.

    Price is strictly decreasing in yield, so a 1D root solve on [lo, hi] is enough.
    """
    if target_price <= 0:
        raise ValueError("target_price must be positive.")

    params = BondParameters(face_value, coupon_rate, 0.0, years, frequency)

    def residual(ytm: float) -> float:
        return _price_at(params, ytm) - target_price

    fa, fb = residual(lo), residual(hi)
    if fa * fb > 0:
        raise ValueError("Root not bracketed: target price outside the reachable range.")

    return float(brentq(residual, lo, hi, maxiter=300, xtol=1e-14))


def price_dv01(params: BondParameters, bp: float = 1.0) -> float:
    """Price change for a +bp move in ytm (negative for a plain bond)."""
    base = price_bond(params).price
    shocked = _price_at(params, params.ytm + bp / 100.0)
    return shocked - base


def modified_duration(params: BondParameters, bp: float = 1.0) -> float:
    base = price_bond(params).price
    return -price_dv01(params, bp) / (base * bp / 10000.0)


def macaulay_duration(params: BondParameters) -> float:
    """PV-weighted average time (years) of the coupon and redemption payments."""
    pc = price_bond(params)
    n = pc.periods

    dfs = discount_factors(pc.periodic_yield, n)[1:]
    cfs = np.full(n, pc.periodic_coupon, dtype=float)
    cfs[-1] += params.face_value
    times = np.arange(1, n + 1, dtype=float) / params.frequency

    return float(np.sum(times * cfs * dfs) / pc.price)


def convexity(params: BondParameters, bp: float = 1.0) -> float:
    h = bp / 10000.0
    base = price_bond(params).price
    up = _price_at(params, params.ytm + bp / 100.0)
    down = _price_at(params, params.ytm - bp / 100.0)
    return (up + down - 2 * base) / (base * h**2)
