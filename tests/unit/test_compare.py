"""Tests for reconciling engine output against external totals."""

import logging

import pytest

from arrearcalc.sdk.compare import (
    compare_calculations,
    exceeds_tolerance,
    percent_difference,
)
from arrearcalc.sdk.engine import calculate_arrears
from arrearcalc.sdk.schemas import ExternalTotals


@pytest.fixture
def one_month():
    """Single full month: due 100000, drawn 0."""
    return calculate_arrears("2020-01-01", "2020-01-31", [{"date": "2020-01-01", "basic_pay": 100000}], [])


@pytest.fixture
def two_months():
    """Jan + Feb 2020, each with net 100000."""
    return calculate_arrears("2020-01-01", "2020-02-29", [{"date": "2020-01-01", "basic_pay": 100000}], [])


class TestHelpers:

    def test_percent_difference(self):
        assert percent_difference(110, 100) == pytest.approx(10.0)
        assert percent_difference(90, 100) == pytest.approx(-10.0)

    def test_percent_difference_none_for_zero_external(self):
        assert percent_difference(50, 0) is None

    def test_tolerance_relative_to_system_value(self):
        # 1% of 100000 is 1000
        assert not exceeds_tolerance(100000, 101000, 0.01)
        assert exceeds_tolerance(100000, 101001, 0.01)

    def test_zero_system_value_flags_any_difference(self):
        assert exceeds_tolerance(0, 1, 0.01)
        assert not exceeds_tolerance(0, 0, 0.01)


class TestOverallTotals:

    def test_within_tolerance_not_flagged(self, one_month):
        result = compare_calculations(
            one_month, {"total_due": 100500, "total_drawn": 0, "net_arrear": 100000},
        )
        assert result.discrepancies == []
        assert not result.has_discrepancies
        assert result.match_percentage == 100
        assert result.overall_accuracy == 100

    def test_due_gap_flagged_with_reasons(self, one_month):
        result = compare_calculations(
            one_month, {"total_due": 98000, "total_drawn": 0, "net_arrear": 100000},
        )

        assert len(result.discrepancies) == 1
        d = result.discrepancies[0]
        assert d.field == "Total Due"
        assert d.period == "Overall"
        assert d.difference == 2000
        assert d.percent_diff == pytest.approx(2.0408, abs=1e-3)
        assert d.possible_reasons == [
            "Missing pay events or incorrect basic pay",
            "Possible rounding difference",
            "Different DA rate applied",
        ]
        # error 2000 over due + drawn + net = 200000
        assert result.overall_accuracy == pytest.approx(99.0)
        assert result.match_percentage == pytest.approx(66.67, abs=0.01)

    def test_small_due_gap_skips_large_gap_reason(self):
        segments = calculate_arrears("2020-01-01", "2020-01-31", [{"date": "2020-01-01", "basic_pay": 10000}], [])
        result = compare_calculations(segments, {"total_due": 10550, "total_drawn": 0, "net_arrear": 10000})
        assert result.discrepancies[0].possible_reasons == ["Different DA rate applied"]

    def test_drawn_gap_reasons(self):
        segments = calculate_arrears(
            "2020-01-01", "2020-01-31",
            [{"date": "2020-01-01", "basic_pay": 100000, "drawn_basic_pay": 50000}], [],
        )
        result = compare_calculations(segments, {"total_due": 100000, "total_drawn": 45000, "net_arrear": 50000})
        drawn = [d for d in result.discrepancies if d.field == "Total Drawn"]
        assert len(drawn) == 1
        assert drawn[0].possible_reasons == [
            "Incorrect drawn basic pay or grade pay",
            "Different pre-revised DA rate",
            "Missing interim relief component",
        ]

    def test_net_arrear_gap(self, one_month):
        result = compare_calculations(
            one_month, {"total_due": 100000, "total_drawn": 0, "net_arrear": 90000},
        )
        assert [d.field for d in result.discrepancies] == ["Net Arrear"]
        assert result.discrepancies[0].possible_reasons == ["Cascading effect from Due/Drawn differences"]

    def test_zero_external_value_has_no_percent(self, one_month):
        result = compare_calculations(
            one_month, {"total_due": 0, "total_drawn": 0, "net_arrear": 100000},
        )
        due = result.discrepancies[0]
        assert due.field == "Total Due"
        assert due.percent_diff is None

    def test_accepts_model(self, one_month):
        external = ExternalTotals(total_due=100000, total_drawn=0, net_arrear=100000)
        result = compare_calculations(one_month, external)
        assert result.external == external
        assert result.system_total_due == 100000
        assert result.system_net_arrear == 100000


class TestPeriodBreakdowns:

    def test_period_tolerance_is_two_percent(self, two_months):
        external = {
            "total_due": 200000,
            "total_drawn": 0,
            "net_arrear": 200000,
            "breakdowns": [
                {"period": "01.01.20 - 31.01.20", "amount": 101900},
                {"period": "01.02.20 - 29.02.20", "amount": 97000},
            ],
        }
        result = compare_calculations(two_months, external)

        assert len(result.discrepancies) == 1
        d = result.discrepancies[0]
        assert d.field == "Period Arrear"
        assert d.period == "01.02.20 - 29.02.20"
        assert d.possible_reasons == ["Period-specific calculation error", "Different pro-rata logic"]
        assert result.match_percentage == pytest.approx(80.0)

    def test_custom_tolerances(self, two_months):
        external = {
            "total_due": 200000, "total_drawn": 0, "net_arrear": 200000,
            "breakdowns": [{"period": "Jan", "amount": 101900}],
        }
        result = compare_calculations(two_months, external, period_tolerance=0.001)
        assert [d.field for d in result.discrepancies] == ["Period Arrear"]

    def test_extra_breakdowns_counted_but_not_compared(self, two_months, caplog):
        external = {
            "total_due": 200000, "total_drawn": 0, "net_arrear": 200000,
            "breakdowns": [
                {"period": "Jan", "amount": 100000},
                {"period": "Feb", "amount": 100000},
                {"period": "Mar", "amount": 5},
            ],
        }
        with caplog.at_level(logging.WARNING, logger="arrearcalc.sdk.compare"):
            result = compare_calculations(two_months, external)

        assert result.discrepancies == []
        assert result.match_percentage == 100
        assert "extra breakdowns were not compared" in caplog.text


class TestEmptyInputs:

    def test_all_zero_is_perfect_match(self):
        result = compare_calculations([], {"total_due": 0, "total_drawn": 0, "net_arrear": 0})
        assert result.overall_accuracy == 100
        assert result.match_percentage == 100

    def test_zero_system_with_external_values(self):
        result = compare_calculations([], {"total_due": 500, "total_drawn": 0, "net_arrear": 500})
        assert result.has_discrepancies
        assert result.overall_accuracy == 0

    def test_accuracy_floor_at_zero(self, one_month):
        result = compare_calculations(
            one_month, {"total_due": 1000000, "total_drawn": 900000, "net_arrear": 5000000},
        )
        assert result.overall_accuracy == 0
