"""Tests for arrear totals and the year-wise breakdown."""

from arrearcalc.sdk.engine import calculate_arrears
from arrearcalc.sdk.summary import summarize_segments, total_arrear


class TestTotalArrear:

    def test_reference_sheet(self, sheet_pay_events, sheet_da_rates):
        segments = calculate_arrears("2016-01-01", "2021-06-30", sheet_pay_events, sheet_da_rates)
        assert total_arrear(segments) == 310443

    def test_empty(self):
        assert total_arrear([]) == 0


class TestSummarizeSegments:

    def test_groups_by_start_year(self, sheet_pay_events, sheet_da_rates):
        segments = calculate_arrears("2016-01-01", "2021-06-30", sheet_pay_events, sheet_da_rates)
        summary = summarize_segments(segments)

        assert [y.year for y in summary.years] == [2016, 2017, 2018, 2019, 2020, 2021]
        assert summary.segment_count == 68
        # 2016 has the June split, 2018 the May split
        assert [y.period_count for y in summary.years] == [13, 12, 13, 12, 12, 6]
        assert sum(y.net_arrear for y in summary.years) == summary.net_arrear == 310443

    def test_totals_match_segments(self, sheet_pay_events, sheet_da_rates):
        segments = calculate_arrears("2016-01-01", "2016-12-31", sheet_pay_events, sheet_da_rates)
        summary = summarize_segments(segments)
        assert summary.total_due == sum(s.total_due for s in segments)
        assert summary.total_drawn == sum(s.total_drawn for s in segments)

    def test_empty(self):
        summary = summarize_segments([])
        assert summary.segment_count == 0
        assert summary.years == []
        assert summary.net_arrear == 0

    def test_to_dict_includes_net(self):
        segments = calculate_arrears(
            "2019-12-01", "2020-01-31",
            [{"date": "2019-01-01", "basic_pay": 1000, "drawn_basic_pay": 400}], [],
        )
        data = summarize_segments(segments).to_dict()

        assert data["net_arrear"] == 1200
        assert data["segment_count"] == 2
        assert [y["year"] for y in data["years"]] == [2019, 2020]
        assert data["years"][0]["net_arrear"] == 600
        assert data["years"][1]["period_count"] == 1
