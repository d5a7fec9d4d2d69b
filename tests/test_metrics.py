"""
Tests for ranking and derived metrics.
"""

import pytest

from pnl_core.metrics import growth_rate, latest_growth, profit_margin, top_n_with_other


class TestTopNWithOther:
    """Test top_n_with_other."""

    def test_buckets_tail(self):
        items = [{"name": f"E{i}", "value": float(i)} for i in range(1, 11)]
        result = top_n_with_other(items, 8)
        assert len(result) == 9
        assert [r["name"] for r in result[:8]] == ["E10", "E9", "E8", "E7", "E6", "E5", "E4", "E3"]
        assert result[-1] == {"name": "Other Expenses", "value": 3.0}

    def test_no_bucket_at_or_below_n(self):
        items = [{"name": "A", "value": 1.0}, {"name": "B", "value": 2.0}]
        assert top_n_with_other(items, 2) == [{"name": "B", "value": 2.0}, {"name": "A", "value": 1.0}]

    def test_stable_for_ties(self):
        items = [{"name": "first", "value": 5.0}, {"name": "second", "value": 5.0}, {"name": "third", "value": 5.0}]
        assert [r["name"] for r in top_n_with_other(items, 3)] == ["first", "second", "third"]

    def test_custom_label(self):
        items = [{"name": "A", "value": 3.0}, {"name": "B", "value": 1.0}]
        assert top_n_with_other(items, 1, "Rest")[-1] == {"name": "Rest", "value": 1.0}

    def test_input_not_mutated(self):
        items = [{"name": "A", "value": 1.0}, {"name": "B", "value": 2.0}]
        result = top_n_with_other(items, 1)
        result[0]["value"] = 99.0
        assert items == [{"name": "A", "value": 1.0}, {"name": "B", "value": 2.0}]

    def test_empty(self):
        assert top_n_with_other([], 5) == []


class TestRates:
    """Test growth_rate and profit_margin."""

    def test_growth(self):
        assert growth_rate(150, 100) == pytest.approx(50.0)
        assert growth_rate(80, 100) == pytest.approx(-20.0)

    def test_growth_from_zero_is_clamped(self):
        assert growth_rate(500, 0) == 0.0

    def test_margin(self):
        assert profit_margin(25, 100) == pytest.approx(25.0)

    def test_margin_needs_positive_revenue(self):
        assert profit_margin(25, 0) == 0.0
        assert profit_margin(25, -100) == 0.0

    def test_latest_growth(self):
        assert latest_growth({"P1": 400.0, "P2": 450.0}) == pytest.approx(12.5)
        assert latest_growth({"P1": 400.0}) == 0.0
