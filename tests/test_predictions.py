"""
Tests for probability vector ranking.
"""

import pytest

from faceprop.core.exceptions import ValidationError
from faceprop.services.predictions import format_predictions, rank_predictions


class TestRankPredictions:
    def test_sorted_descending(self):
        ranked = rank_predictions({"a": 0.1, "b": 0.7, "c": 0.2})
        assert [p.label for p in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        ranked = rank_predictions({"x": 0.5, "y": 0.5})
        assert [p.label for p in ranked] == ["x", "y"]

    def test_percentages_normalized(self):
        ranked = rank_predictions({"a": 87.5, "b": 12.5})
        assert ranked[0].probability == pytest.approx(0.875)

    def test_parallel_sequences(self):
        ranked = rank_predictions([0.2, 0.8], labels=["cat", "dog"])
        assert ranked[0].label == "dog"

    def test_label_count_mismatch(self):
        with pytest.raises(ValidationError):
            rank_predictions([0.2, 0.8], labels=["cat"])

    def test_top_k(self):
        ranked = rank_predictions({"a": 0.1, "b": 0.7, "c": 0.2}, top_k=2)
        assert [p.label for p in ranked] == ["b", "c"]

    def test_top_k_zero_keeps_none(self):
        assert rank_predictions({"a": 0.1, "b": 0.7}, top_k=0) == []

    def test_top_k_none_keeps_all(self):
        assert len(rank_predictions({"a": 0.1, "b": 0.7, "c": 0.2}, top_k=None)) == 3

    def test_negative_top_k_rejected(self):
        with pytest.raises(ValidationError):
            rank_predictions({"a": 0.1, "b": 0.7}, top_k=-1)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            rank_predictions({"a": -0.1, "b": 0.5})

    def test_percentages_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            rank_predictions({"a": 150.0})


class TestFormatPredictions:
    def test_format(self):
        ranked = rank_predictions({"oval": 0.875, "round": 0.125})
        assert format_predictions(ranked) == ["oval: 87.5%", "round: 12.5%"]

    def test_places(self):
        ranked = rank_predictions({"oval": 0.5})
        assert format_predictions(ranked, places=0) == ["oval: 50%"]
