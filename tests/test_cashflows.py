import itertools

import pytest

from bond_valuation_engine.cashflows import (
    CASH_FLOW_COLUMNS,
    cash_flow_table,
    generate_cash_flows,
    net_present_value,
)
from bond_valuation_engine.pricing import BondParameters, price_bond


@pytest.fixture(scope="module")
def schedule():
    params = BondParameters(100.0, 8.0, 6.0, 5.0, 2)
    pc = price_bond(params)
    flows = generate_cash_flows(100.0, 2, 5.0, pc.periodic_coupon, pc.price)
    return pc, flows


def test_schedule_shape(schedule):
    pc, flows = schedule
    assert len(flows) == 5 * 2 + 1
    assert [cf.period for cf in flows] == list(range(11))
    assert flows[-1].year_label == 5.0
    assert flows[3].year_label == 1.5


def test_purchase_outflow_and_redemption(schedule):
    pc, flows = schedule
    first, last = flows[0], flows[-1]
    assert first.coupon_payment == 0.0
    assert first.principal_payment == -pc.price
    assert first.total_cash_flow == -pc.price
    assert last.principal_payment == 100.0
    assert last.total_cash_flow == pc.periodic_coupon + 100.0


def test_interior_entries_carry_coupon_only(schedule):
    pc, flows = schedule
    for cf in flows[1:-1]:
        assert cf.principal_payment == 0.0
        assert cf.coupon_payment == pc.periodic_coupon
        assert cf.total_cash_flow == pc.periodic_coupon


def test_single_period_schedule():
    flows = generate_cash_flows(100.0, 1, 1.0, 5.0, 99.0)
    assert len(flows) == 2
    assert flows[1].principal_payment == 100.0
    assert flows[1].total_cash_flow == 105.0


@pytest.mark.parametrize(
    "face,coupon,ytm,years,freq",
    list(itertools.product([100.0, 1000.0], [0.0, 4.0, 9.5], [-0.5, 0.0, 6.0, 15.0], [1.0, 7.0, 30.0], [1, 2, 4, 12])),
)
def test_schedule_discounts_to_zero(face, coupon, ytm, years, freq):
    pc = price_bond(BondParameters(face, coupon, ytm, years, freq))
    flows = generate_cash_flows(face, freq, years, pc.periodic_coupon, pc.price)
    npv = net_present_value(flows, pc.periodic_yield)
    assert abs(npv) < 1e-9 * face, f"schedule should discount back to zero at the pricing yield (npv={npv})"


def test_npv_sign_at_other_yields(schedule):
    pc, flows = schedule
    assert net_present_value(flows, pc.periodic_yield + 0.01) < 0.0
    assert net_present_value(flows, pc.periodic_yield - 0.01) > 0.0


def test_npv_of_empty_schedule():
    assert net_present_value([], 0.03) == 0.0


def test_cash_flow_table(schedule):
    pc, flows = schedule
    table = cash_flow_table(flows)
    assert list(table.columns) == CASH_FLOW_COLUMNS
    assert len(table) == 11
    assert table["principal_payment"].iloc[-1] == 100.0
    # undiscounted: ten coupons plus redemption, less the purchase price
    assert abs(table["total_cash_flow"].sum() - (10 * 4.0 + 100.0 - pc.price)) < 1e-9
