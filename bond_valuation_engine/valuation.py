from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from .pricing import BondParameters, price_bond
from .cashflows import CashFlow, generate_cash_flows, cash_flow_table, net_present_value
from .classification import BondClassification, classify, PAR, PREMIUM, DISCOUNT
from .config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValuationResult:
    bond_price: float
    pv_coupons: float
    pv_face_value: float
    periodic_coupon: float
    periodic_yield: float
    periods: int
    cash_flows: Tuple[CashFlow, ...]
    bond_type: BondClassification

    def cash_flow_table(self) -> pd.DataFrame:
        """Schedule as a DataFrame; the bond price is carried in ``attrs['bond_price']``."""
        table = cash_flow_table(self.cash_flows)
        table.attrs["bond_price"] = self.bond_price
        return table

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_bond_metrics(params: BondParameters, tolerance: Optional[float] = None) -> ValuationResult:
    """
    Price the bond, build its cash-flow schedule from that price, and classify it against face.

    DomainError from pricing propagates; no partial result is ever returned.
    """
    if tolerance is None:
        tolerance = DEFAULT_CONFIG.par_tolerance

    components = price_bond(params)

    flows = generate_cash_flows(
        face_value=params.face_value,
        frequency=params.frequency,
        years=params.years,
        periodic_coupon=components.periodic_coupon,
        bond_price=components.price,
    )

    bond_type = classify(components.price, params.face_value, tolerance)

    return ValuationResult(
        bond_price=components.price,
        pv_coupons=components.pv_coupons,
        pv_face_value=components.pv_face_value,
        periodic_coupon=components.periodic_coupon,
        periodic_yield=components.periodic_yield,
        periods=components.periods,
        cash_flows=flows,
        bond_type=bond_type,
    )


# ---- Start-up QC ----

_QC_SCENARIOS = [
    ("Par bond pricing", 6.0, PAR),
    ("Premium bond pricing", 8.0, PREMIUM),
    ("Discount bond pricing", 4.0, DISCOUNT),
]


def valuation_qc_report(
    face_value: float = 100.0,
    ytm: float = 6.0,
    years: float = 5.0,
    frequency: int = 2,
    par_band: float = 0.2,
    npv_tol: float = 1e-8,
) -> pd.DataFrame:
    """
    Sanity checks on reference bonds (coupon 6/8/4 against a 6% yield).

    Each row checks the price against face value (par within par_band, premium above, discount below),
    the PV decomposition identity, and that the schedule discounts back to zero.
    Failed rows are logged at WARNING.
    """
    rows = []
    for name, coupon_rate, expected in _QC_SCENARIOS:
        params = BondParameters(face_value, coupon_rate, ytm, years, frequency)
        res = calculate_bond_metrics(params)

        if expected == PAR:
            price_ok = abs(res.bond_price - face_value) <= par_band
        elif expected == PREMIUM:
            price_ok = res.bond_price > face_value
        else:
            price_ok = res.bond_price < face_value

        identity_gap = abs(res.bond_price - (res.pv_coupons + res.pv_face_value))
        npv = net_present_value(res.cash_flows, res.periodic_yield)

        rows.append(
            {
                "name": name,
                "coupon_rate": coupon_rate,
                "bond_price": res.bond_price,
                "expected": expected,
                "price_ok": price_ok,
                "identity_ok": identity_gap <= 1e-12 * max(1.0, face_value),
                "npv": npv,
                "npv_ok": abs(npv) <= npv_tol * max(1.0, face_value),
            }
        )

    out = pd.DataFrame(rows)
    out["passed"] = out["price_ok"] & out["identity_ok"] & out["npv_ok"]

    for _, r in out[~out["passed"]].iterrows():
        logger.warning("QC check failed: %s (price=%.6f, npv=%.3e)", r["name"], r["bond_price"], r["npv"])

    return out
