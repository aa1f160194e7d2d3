"""
Data-gap annotation, weighted aggregation and fallback tests.
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from agents.aggregator import WeightedOutcomeAggregator, build_summary
from agents.fallback import FallbackTextAnalyzer, count_mentions
from agents.gap_detector import DataGapAnalyzer, NO_DATA_MESSAGE, compute_data_gap
from models.schemas import (
    CLIENT, COMPETITOR, NEUTRAL, UNCLEAR, STRONG, MODERATE, WEAK, FeatureBattle,
)


def battle(name="placements", winner=UNCLEAR, confidence=WEAK, client=None, competitor=None, gap=None):
    return FeatureBattle(
        feature_name=name,
        winner=winner,
        confidence_level=confidence,
        client_data_points=client or {},
        competitor_data_points=competitor or {},
        data_gap_identified=gap,
    )


# ─── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def aggregator():
    return WeightedOutcomeAggregator()


# ─── DataGapAnalyzer ─────────────────────────────────────────────────────────

class TestDataGapAnalyzer:
    def test_two_sided_gap_names_both(self):
        gap = compute_data_gap(battle(client={"a": 1, "b": 2}, competitor={"a": 1, "c": 3}))
        assert "client missing: c" in gap
        assert "competitor missing: b" in gap

    def test_client_missing_only(self):
        gap = compute_data_gap(battle(client={"a": 1}, competitor={"a": 2, "b": "x", "c": "y"}))
        assert gap == "client missing: b, c"

    def test_competitor_missing_only(self):
        gap = compute_data_gap(battle(client={"rate": "90%"}, competitor={}))
        assert gap == "competitor missing: rate"

    def test_placeholders_do_not_count(self):
        gap = compute_data_gap(battle(client={"a": "N/A"}, competitor={"a": "-", "b": []}))
        assert gap == NO_DATA_MESSAGE

    def test_symmetric_keys_have_no_gap(self):
        assert compute_data_gap(battle(client={"a": 1}, competitor={"a": 2})) is None

    def test_agent_replaces_model_gap_text(self):
        b = battle(client={"a": 1}, competitor={"a": 2}, gap="model thinks data is missing")
        annotated = DataGapAnalyzer().run([b])
        assert annotated[0].data_gap_identified is None
        assert b.data_gap_identified == "model thinks data is missing"


# ─── WeightedOutcomeAggregator ───────────────────────────────────────────────

class TestWeightedOutcomeAggregator:
    def test_weighted_winner(self, aggregator):
        result = aggregator.run([
            battle("placements", CLIENT, STRONG),
            battle("fees", COMPETITOR, STRONG),
        ])
        assert result.client_weighted_score == pytest.approx(30.0)
        assert result.competitor_weighted_score == pytest.approx(20.0)
        assert result.overall_winner == CLIENT

    def test_margin_below_five_is_neutral(self, aggregator):
        result = aggregator.run([
            battle("placements", CLIENT, WEAK),         # 9
            battle("location", COMPETITOR, STRONG),     # 5
        ])
        assert result.overall_winner == NEUTRAL

    def test_margin_of_exactly_five_is_decisive(self, aggregator):
        result = aggregator.run([battle("location", COMPETITOR, STRONG)])
        assert result.overall_winner == COMPETITOR

    def test_unknown_feature_uses_default_weight(self, aggregator):
        result = aggregator.run([battle("Sports", CLIENT, STRONG)])
        assert result.client_weighted_score == pytest.approx(10.0)

    def test_industry_exposure_spellings(self, aggregator):
        for name in ("industry_exposure", "Industry Exposure", "industryexposure"):
            assert aggregator.base_weight(name) == 5.0

    def test_neutral_and_unclear_contribute_nothing(self, aggregator):
        result = aggregator.run([
            battle("placements", NEUTRAL, STRONG),
            battle("fees", UNCLEAR, STRONG),
        ])
        assert result.client_weighted_score == 0.0
        assert result.competitor_weighted_score == 0.0
        assert result.overall_winner == NEUTRAL

    def test_empty_battles(self, aggregator):
        assert aggregator.run([]).overall_winner == NEUTRAL

    def test_weight_overrides(self):
        aggregator = WeightedOutcomeAggregator(feature_weights={"location": 50})
        result = aggregator.run([
            battle("location", CLIENT, MODERATE),       # 30
            battle("placements", COMPETITOR, STRONG),   # default 10
        ])
        assert result.client_weighted_score == pytest.approx(30.0)
        assert result.competitor_weighted_score == pytest.approx(10.0)
        assert result.overall_winner == CLIENT

    def test_summary_lists_strengths_and_gaps(self):
        features = [
            battle("placements", CLIENT, STRONG),
            battle("fees", COMPETITOR, MODERATE, gap="client missing: annualFees"),
        ]
        summary = build_summary(features, CLIENT)
        assert summary.startswith("Client wins overall. Strengths: placements.")
        assert "Competitor strengths: fees." in summary
        assert "Data gaps: fees: client missing: annualFees." in summary

    def test_neutral_summary(self):
        assert build_summary([], NEUTRAL) == "Highly competitive matchup."


# ─── FallbackTextAnalyzer ────────────────────────────────────────────────────

class TestFallbackTextAnalyzer:
    def test_mention_ratio_declares_winner(self):
        text = "XYZ has labs. xyz has hostels. XYZ has placements. ABC is older."
        result = FallbackTextAnalyzer("XYZ", "ABC").run(text)
        assert result.overall_winner == CLIENT
        assert result.features == []
        assert result.used_fallback
        assert "XYZ mentioned 3 times, ABC mentioned 1 times." in result.summary

    def test_ratio_boundary_is_inclusive(self):
        text = "ABC ABC ABC XYZ XYZ"
        assert FallbackTextAnalyzer("XYZ", "ABC").run(text).overall_winner == COMPETITOR

    def test_close_counts_are_unclear(self):
        text = "ABC ABC XYZ XYZ"
        assert FallbackTextAnalyzer("XYZ", "ABC").run(text).overall_winner == UNCLEAR

    def test_no_mentions_are_unclear(self):
        assert FallbackTextAnalyzer("XYZ", "ABC").run("nothing here").overall_winner == UNCLEAR

    def test_empty_name_counts_zero(self):
        assert count_mentions("some text", "") == 0
