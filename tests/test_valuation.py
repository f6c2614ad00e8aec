import logging

import pytest

from bond_valuation_engine.cashflows import CASH_FLOW_COLUMNS, net_present_value
from bond_valuation_engine.errors import DomainError
from bond_valuation_engine.pricing import BondParameters
from bond_valuation_engine.valuation import calculate_bond_metrics, valuation_qc_report


def _params(coupon_rate, ytm=6.0):
    return BondParameters(face_value=100.0, coupon_rate=coupon_rate, ytm=ytm, years=5.0, frequency=2)


def test_par_scenario():
    res = calculate_bond_metrics(_params(6.0))
    assert abs(res.bond_price - 100.0) <= 0.2
    assert res.bond_type.type == "par"
    assert res.bond_type.difference == 0.0


def test_premium_scenario():
    res = calculate_bond_metrics(_params(8.0))
    assert res.bond_price > 100.0
    assert res.bond_type.type == "premium"
    assert abs(res.bond_type.difference - (res.bond_price - 100.0)) < 1e-12


def test_discount_scenario():
    res = calculate_bond_metrics(_params(4.0))
    assert res.bond_price < 100.0
    assert res.bond_type.type == "discount"
    assert abs(res.bond_type.difference - (100.0 - res.bond_price)) < 1e-12


def test_result_is_consistent_with_its_schedule():
    res = calculate_bond_metrics(_params(8.6, ytm=6.5))
    assert res.periods == 10
    assert len(res.cash_flows) == res.periods + 1
    assert res.cash_flows[0].principal_payment == -res.bond_price
    assert res.cash_flows[-1].principal_payment == 100.0
    assert res.bond_price == res.pv_coupons + res.pv_face_value
    assert abs(net_present_value(res.cash_flows, res.periodic_yield)) < 1e-10


def test_near_par_price_is_left_unrounded():
    # 6% coupon at a 6.0001% yield prices a hair below 100 but inside the par band
    res = calculate_bond_metrics(_params(6.0, ytm=6.0001))
    assert res.bond_type.type == "par"
    assert res.bond_type.difference == 0.0
    assert res.bond_price != 100.0
    assert res.bond_price < 100.0


def test_tolerance_override():
    res = calculate_bond_metrics(_params(6.0, ytm=6.1), tolerance=1.0)
    assert res.bond_type.type == "par"
    res = calculate_bond_metrics(_params(6.0, ytm=6.1), tolerance=0.01)
    assert res.bond_type.type == "discount"


def test_idempotent():
    params = _params(7.25, ytm=5.1)
    assert calculate_bond_metrics(params) == calculate_bond_metrics(params)


def test_domain_error_propagates():
    with pytest.raises(DomainError):
        calculate_bond_metrics(_params(6.0, ytm=-200.0))


def test_cash_flow_table_carries_price():
    res = calculate_bond_metrics(_params(8.0))
    table = res.cash_flow_table()
    assert list(table.columns) == CASH_FLOW_COLUMNS
    assert table.attrs["bond_price"] == res.bond_price


def test_to_dict():
    res = calculate_bond_metrics(_params(8.0))
    d = res.to_dict()
    assert d["bond_price"] == res.bond_price
    assert d["bond_type"]["type"] == "premium"
    assert len(d["cash_flows"]) == 11
    assert d["cash_flows"][0]["period"] == 0


def test_qc_report_passes(caplog):
    with caplog.at_level(logging.WARNING, logger="bond_valuation_engine.valuation"):
        qc = valuation_qc_report()
    assert list(qc["name"]) == ["Par bond pricing", "Premium bond pricing", "Discount bond pricing"]
    assert qc["passed"].all()
    assert not caplog.records


def test_qc_report_logs_failures(caplog):
    # a negative par band can never be met
    with caplog.at_level(logging.WARNING, logger="bond_valuation_engine.valuation"):
        qc = valuation_qc_report(par_band=-1.0)
    assert not qc.loc[0, "passed"]
    assert qc.loc[1:, "passed"].all()
    assert any("Par bond pricing" in r.getMessage() for r in caplog.records)
