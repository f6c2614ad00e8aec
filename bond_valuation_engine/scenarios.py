from __future__ import annotations

from dataclasses import replace
from typing import Iterable

import pandas as pd

from .pricing import BondParameters
from .valuation import calculate_bond_metrics


def run_yield_scenarios(
    params: BondParameters,
    shocks_bp: Iterable[float] = (-50, -25, 0, 25, 50),
) -> pd.DataFrame:
    """Reprice the bond under parallel ytm shocks and report PnL against the unshocked price."""
    base = calculate_bond_metrics(params)

    rows = []
    for s_bp in shocks_bp:
        shocked = calculate_bond_metrics(replace(params, ytm=params.ytm + s_bp / 100.0))
        rows.append(
            {
                "shock_bp": s_bp,
                "ytm": params.ytm + s_bp / 100.0,
                "bond_price": shocked.bond_price,
                "pnl": shocked.bond_price - base.bond_price,
                "bond_type": shocked.bond_type.type,
            }
        )

    out = pd.DataFrame(rows, columns=["shock_bp", "ytm", "bond_price", "pnl", "bond_type"])
    return out.sort_values("shock_bp").reset_index(drop=True)
