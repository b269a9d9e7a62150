"""Tests for strategy projections and scenario comparison."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debt_calc.engine import baseline_simulation, budget_allocation, compare_scenarios, project


class TestProject:
    def test_avalanche_scenario_first_month_snapshot(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("400"), "avalanche")
        extras = projection.extra_payment_allocations
        assert extras["B"] == Decimal("200.00")
        assert extras.get("A", Decimal("0")) == 0
        assert extras.get("C", Decimal("0")) == 0

    def test_strategy_saves_time_and_interest(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("400"), "avalanche")
        baseline = baseline_simulation(three_loans)
        assert projection.interest_savings == baseline.total_interest - projection.total_interest
        assert projection.time_savings == baseline.total_months - projection.total_months
        assert projection.interest_savings > 0
        assert projection.time_savings > 0

    def test_total_months_is_last_loan_retired(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("400"), "snowball")
        assert projection.total_months == max(p.months_to_payoff for p in projection.loans)

    def test_no_budget_degenerates_to_baseline(self, three_loans):
        projection = project(three_loans, None, "avalanche")
        assert projection.interest_savings == 0
        assert projection.time_savings == 0
        assert projection.extra_payment_allocations == {}

    def test_inactive_budget_is_ignored(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("900", active=False), "avalanche")
        assert projection.time_savings == 0
        assert projection.extra_payment_allocations == {}

    @pytest.mark.parametrize("strategy", ["snowball", "avalanche", "custom"])
    def test_budget_equal_to_minimums_saves_nothing(self, three_loans, budget_factory, strategy):
        projection = project(three_loans, budget_factory("200"), strategy)
        assert projection.interest_savings == 0
        assert projection.time_savings == 0

    def test_no_strategy_has_no_extra_allocation(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("400"), None)
        assert projection.extra_payment_allocations == {}
        assert projection.time_savings == 0

    def test_snapshot_extras_are_rounded_to_cents(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("200.456"), "avalanche")
        assert projection.extra_payment_allocations == {"B": Decimal("0.46")}

    def test_snapshot_ignores_sub_cent_surplus(self, three_loans, budget_factory):
        projection = project(three_loans, budget_factory("200.005"), "avalanche")
        assert projection.extra_payment_allocations == {}

    def test_zero_loans(self, budget_factory):
        projection = project([], budget_factory("400"), "avalanche")
        assert projection.loans == []
        assert projection.total_months == 0
        assert projection.total_interest == 0
        assert projection.interest_savings == 0
        assert projection.time_savings == 0

    def test_inactive_loans_are_not_projected(self, three_loans, loan_factory, budget_factory):
        loans = three_loans + [loan_factory(id="D", balance="9000", active=False)]
        projection = project(loans, budget_factory("400"), "avalanche")
        assert {p.loan_id for p in projection.loans} == {"A", "B", "C"}


def test_budget_allocation_falls_back_to_obligation(three_loans, budget_factory):
    assert budget_allocation(three_loans, None) == Decimal("200")
    assert budget_allocation(three_loans, budget_factory("350")) == Decimal("350")


class TestCompareScenarios:
    def test_report_pairs_minimum_and_strategy(self, three_loans, budget_factory):
        report = compare_scenarios(three_loans, budget_factory("400"), "Avalanche")
        assert report.strategy_type == "avalanche"
        assert report.monthly_obligation == Decimal("200")
        assert report.minimum.extra_payment_allocations == {}
        assert report.interest_savings == report.minimum.total_interest - report.strategy.total_interest
        assert report.time_savings == report.minimum.total_months - report.strategy.total_months
        assert report.interest_savings == report.strategy.interest_savings

    def test_unknown_strategy_compares_equal(self, three_loans, budget_factory):
        report = compare_scenarios(three_loans, budget_factory("400"), "hybrid")
        assert report.strategy_type is None
        assert report.interest_savings == 0
        assert report.time_savings == 0


def test_eight_loan_household_portfolio(loan_factory, budget_factory):
    rows = [
        (1, "300000", "5000", "5.00"),
        (2, "150000", "6000", "6.50"),
        (3, "45000", "3000", "4.75"),
        (4, "25000", "4500", "12.00"),
        (5, "18000", "3500", "15.00"),
        (6, "8500", "3000", "18.00"),
        (7, "60000", "2000", "3.00"),
        (8, "12000", "2500", "5.50"),
    ]
    loans = [
        loan_factory(id=loan_id, balance=balance, minimum=minimum, rate=rate)
        for loan_id, balance, minimum, rate in rows
    ]
    budget = budget_factory("200000")

    baseline = baseline_simulation(loans)
    assert baseline.total_months == 70

    for strategy in ("avalanche", "snowball"):
        projection = project(loans, budget, strategy)
        assert projection.total_months == 4
        assert projection.time_savings == 66
        assert projection.interest_savings > 0


class TestNonFiniteLoans:
    def test_nan_minimum_gives_trivial_projection(self, loan_factory):
        projection = project([loan_factory(minimum="NaN")], None, "avalanche")
        assert projection.total_months == 0
        assert projection.total_interest == 0
        assert projection.interest_savings == 0
        assert projection.extra_payment_allocations == {}

    def test_nan_rate_loan_is_left_out_of_the_plan(self, three_loans, loan_factory, budget_factory):
        loans = three_loans + [loan_factory(id="D", rate="NaN")]
        projection = project(loans, budget_factory("400"), "avalanche")
        by_id = {p.loan_id: p for p in projection.loans}
        assert by_id["D"].months_to_payoff == 0
        assert projection.extra_payment_allocations == {"B": Decimal("200.00")}
        assert projection.total_months == project(three_loans, budget_factory("400"), "avalanche").total_months

    def test_compare_with_nan_rate_and_no_strategy(self, loan_factory):
        report = compare_scenarios([loan_factory(rate="NaN")], None, None)
        assert report.monthly_obligation == 0
        assert report.time_savings == 0
