from __future__ import annotations

import numpy as np
import pandas as pd
from dataclasses import dataclass, asdict
from typing import Sequence, Tuple

from .pricing import period_count, discount_factors


CASH_FLOW_COLUMNS = ["period", "year_label", "coupon_payment", "principal_payment", "total_cash_flow"]


@dataclass(frozen=True)
class CashFlow:
    period: int
    year_label: float
    coupon_payment: float
    principal_payment: float
    total_cash_flow: float


def generate_cash_flows(
    face_value: float,
    frequency: int,
    years: float,
    periodic_coupon: float,
    bond_price: float,
) -> Tuple[CashFlow, ...]:
    """
    Investor cash-flow schedule: purchase outflow at period 0, one coupon per period,
    face value redeemed with the last coupon.

    Price and coupon are taken as given so the schedule always matches the price actually quoted.
    """
    periods = period_count(years, frequency)

    rows = [CashFlow(period=0, year_label=0.0, coupon_payment=0.0, principal_payment=-bond_price, total_cash_flow=-bond_price)]
    for t in range(1, periods + 1):
        principal = face_value if t == periods else 0.0
        rows.append(
            CashFlow(
                period=t,
                year_label=t / frequency,
                coupon_payment=periodic_coupon,
                principal_payment=principal,
                total_cash_flow=periodic_coupon + principal,
            )
        )

    return tuple(rows)


def cash_flow_table(cash_flows: Sequence[CashFlow]) -> pd.DataFrame:
    return pd.DataFrame([asdict(cf) for cf in cash_flows], columns=CASH_FLOW_COLUMNS)


def net_present_value(cash_flows: Sequence[CashFlow], periodic_yield: float) -> float:
    """
    Sum of total_cash_flow * (1 + y)^-period over the schedule.

    Zero (to float tolerance) when the schedule was generated from the fair price at y.
    """
    if len(cash_flows) == 0:
        return 0.0

    periods = np.array([cf.period for cf in cash_flows], dtype=int)
    totals = np.array([cf.total_cash_flow for cf in cash_flows], dtype=float)
    dfs = discount_factors(periodic_yield, int(periods.max()))
    return float(np.sum(totals * dfs[periods]))
