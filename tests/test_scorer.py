"""
Deterministic scoring tests: one class per attribute strategy.
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from agents.cleaning import clean_data_value, parse_amount, parse_rank, parse_rate
from agents.scorer import (
    DeterministicFeatureScorer, SCORING_STRATEGIES, count_top_tier_recruiters,
    faculty_points, normalize_feature_key, score_battle,
)
from models.schemas import (
    CLIENT, COMPETITOR, NEUTRAL, STRONG, MODERATE, WEAK, FeatureBattle,
)


def battle(name, client=None, competitor=None, **kwargs):
    return FeatureBattle(
        feature_name=name,
        client_data_points=client or {},
        competitor_data_points=competitor or {},
        **kwargs,
    )


def verdict(b):
    scored = score_battle(b)
    return scored.winner, scored.confidence_level


# ─── Cleaning & parsing ──────────────────────────────────────────────────────

class TestCleaning:
    @pytest.mark.parametrize("value", ["Not Specified", "n/a", "NA", " unknown ", "", "-"])
    def test_placeholders_are_absent(self, value):
        assert clean_data_value(value) is None

    def test_list_filtered_element_wise(self):
        assert clean_data_value(["Google", "N/A", "TCS"]) == ["Google", "TCS"]
        assert clean_data_value(["n/a", "-"]) is None

    def test_parse_rate(self):
        assert parse_rate("90-95%") == 92.5
        assert parse_rate("85%") == 85.0
        assert parse_rate("not specified") is None
        assert parse_rate("excellent") is None

    def test_parse_amount_units(self):
        assert parse_amount("5.8-6.5 LPA") == pytest.approx(6.15)
        assert parse_amount("12 lakh") == 12.0
        assert parse_amount("₹1,50,000") == 1.5
        assert parse_amount(250000) == 2.5
        assert parse_amount("8") == 8.0
        assert parse_amount("on request") is None

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_are_absent(self, value):
        assert clean_data_value(value) is None
        assert parse_amount(value) is None
        assert parse_rate(value) is None
        assert parse_rank(value) is None

    def test_overlong_digit_runs_are_absent(self):
        digits = "9" * 400
        assert parse_amount(digits) is None
        assert parse_rate(digits + "%") is None
        assert parse_rank(f"{digits}-{digits}") is None

    def test_parse_rank(self):
        assert parse_rank("#45") == 45.0
        assert parse_rank("151-200") == 175.5
        assert parse_rank("unranked") is None

    def test_feature_key_normalized(self):
        assert normalize_feature_key("  Industry Exposure ") == "industry_exposure"
        assert normalize_feature_key("Placements") == "placements"


# ─── Placements ──────────────────────────────────────────────────────────────

class TestPlacements:
    def test_rate_range_beats_single_rate(self):
        b = battle("placements", {"placementRate": "90-95%"}, {"placementRate": "80%"})
        assert verdict(b) == (CLIENT, MODERATE)

    def test_rate_and_salary_together_are_strong(self):
        b = battle(
            "placements",
            {"placementRate": "80%", "averagePackage": "5 LPA"},
            {"placementRate": "92%", "averagePackage": "7.5 LPA"},
        )
        assert verdict(b) == (COMPETITOR, STRONG)

    def test_missing_rate_loses_to_present_rate(self):
        b = battle("placements", {"placementRate": "N/A"}, {"placementRate": "85%"})
        assert verdict(b) == (COMPETITOR, MODERATE)

    def test_salary_priority_uses_first_nonzero(self):
        b = battle(
            "placements",
            {"averagePackage": "0", "medianSalary": "9 LPA"},
            {"averagePackage": "6 LPA"},
        )
        assert verdict(b) == (CLIENT, MODERATE)

    def test_highest_package_tie_contributes_nothing(self):
        b = battle("placements", {"highestPackage": "40 LPA"}, {"highestPackage": "40 LPA"})
        # salary falls back to highestPackage on both sides and ties too
        assert verdict(b) == (NEUTRAL, MODERATE)

    def test_recruiter_quality(self):
        assert count_top_tier_recruiters(["Google", "Microsoft India", "TCS"]) == 2
        assert count_top_tier_recruiters("Amazon, Deloitte, Wipro") == 2
        b = battle("placements", {"topRecruiters": ["Google", "TCS"]}, {"topRecruiters": ["Infosys"]})
        assert verdict(b) == (CLIENT, MODERATE)

    def test_no_data_is_neutral(self):
        assert verdict(battle("placements")) == (NEUTRAL, MODERATE)


# ─── Fees ────────────────────────────────────────────────────────────────────

class TestFees:
    @pytest.mark.parametrize("client,competitor", [
        ({"annualFees": "1.8 lakh"}, {"annualFees": "Not specified"}),
        ({}, {"feeRange": "2-3 LPA"}),
        ({"annualFees": "0"}, {"annualFees": "2 lakh"}),
    ])
    def test_absent_fee_is_always_neutral(self, client, competitor):
        b = battle("fees", client, competitor, winner=CLIENT, confidence_level=STRONG)
        assert verdict(b) == (NEUTRAL, WEAK)

    def test_nan_fee_never_wins(self):
        b = battle("fees", {"annualFees": float("nan")}, {"annualFees": "2 lakh"})
        assert verdict(b) == (NEUTRAL, WEAK)

    def test_lower_fee_wins_strong(self):
        b = battle("fees", {"annualFees": "1.5 lakh"}, {"annualFees": "2.5 lakh"})
        assert verdict(b) == (CLIENT, STRONG)

    def test_moderate_band(self):
        b = battle("fees", {"annualFees": "2.5 lakh"}, {"annualFees": "2 lakh"})
        assert verdict(b) == (COMPETITOR, MODERATE)

    def test_exactly_25_percent_is_moderate(self):
        b = battle("fees", {"annualFees": 150000}, {"annualFees": "₹2,00,000"})
        assert verdict(b) == (CLIENT, MODERATE)

    def test_within_10_percent_is_neutral(self):
        b = battle("fees", {"annualFees": "2 lakh"}, {"annualFees": "2.1 lakh"})
        assert verdict(b) == (NEUTRAL, MODERATE)

    def test_fee_range_preferred_over_annual(self):
        b = battle(
            "fees",
            {"feeRange": "1-2 LPA", "annualFees": "5 lakh"},
            {"annualFees": "3 lakh"},
        )
        assert verdict(b) == (CLIENT, STRONG)


# ─── Accreditation ───────────────────────────────────────────────────────────

class TestAccreditation:
    def test_grade_gap_above_one_is_strong(self):
        b = battle("accreditation", {"naacGrade": "A+"}, {"naacGrade": "B"})
        assert verdict(b) == (CLIENT, STRONG)

    def test_adjacent_grades_are_moderate(self):
        b = battle("accreditation", {"naacGrade": "A"}, {"naacGrade": "A+"})
        assert verdict(b) == (COMPETITOR, MODERATE)

    def test_single_sided_grade_is_strong(self):
        b = battle("accreditation", {"naacGrade": "B"}, {"naacGrade": "N/A"})
        assert verdict(b) == (CLIENT, STRONG)

    def test_verbose_grade_string(self):
        b = battle("accreditation", {"naacGrade": "NAAC A++ accredited"}, {"naacGrade": "B+"})
        assert verdict(b) == (CLIENT, STRONG)

    def test_rank_gap_above_fifty_is_strong(self):
        b = battle("accreditation", {"nirfRank": "#45"}, {"nirfRank": "120"})
        assert verdict(b) == (CLIENT, STRONG)

    def test_single_sided_rank_is_strong(self):
        b = battle("accreditation", {}, {"nirfRank": "151-200"})
        assert verdict(b) == (COMPETITOR, STRONG)

    def test_close_ranks_are_neutral(self):
        b = battle("accreditation", {"nirfRank": "45"}, {"nirfRank": "50"})
        assert verdict(b) == (NEUTRAL, MODERATE)

    def test_both_sub_comparisons_neutral_is_strong_neutral(self):
        b = battle(
            "accreditation",
            {"naacGrade": "A", "nirfRank": "45"},
            {"naacGrade": "A", "nirfRank": "50"},
        )
        assert verdict(b) == (NEUTRAL, STRONG)

    def test_moderate_rank_decides_when_grades_tie(self):
        b = battle(
            "accreditation",
            {"naacGrade": "A", "nirfRank": "100"},
            {"naacGrade": "A", "nirfRank": "80"},
        )
        assert verdict(b) == (COMPETITOR, MODERATE)


# ─── Soft attributes ─────────────────────────────────────────────────────────

class TestSoftAttributes:
    def test_faculty_reasoning_signals(self):
        b = battle(
            "faculty",
            client_reasoning="Over 70% PhD faculty, many from IITs, with industry experience.",
            competitor_reasoning="Qualified faculty.",
        )
        assert verdict(b) == (CLIENT, WEAK)

    def test_faculty_points_breakdown(self):
        assert faculty_points({}, "70% PhD holders") == 2
        assert faculty_points({}, "several phd holders") == 1
        assert faculty_points({"quality": "High"}, "experienced and qualified") == 2
        assert faculty_points({}, "a community unit") == 0

    def test_faculty_equal_is_neutral(self):
        assert verdict(battle("faculty")) == (NEUTRAL, WEAK)

    def test_infrastructure_counts_facilities(self):
        b = battle(
            "infrastructure",
            {"facilities": ["Library", "Labs", "Gym"]},
            {"facilities": "Library, Labs"},
        )
        assert verdict(b) == (CLIENT, WEAK)

    def test_location_connectivity(self):
        assert verdict(battle("location", {}, {"connectivity": "Metro"})) == (COMPETITOR, WEAK)
        assert verdict(battle("location", {"connectivity": "Metro"}, {"connectivity": "Bus"})) == (NEUTRAL, WEAK)
        assert verdict(battle("location", {"connectivity": "N/A"}, {})) == (NEUTRAL, WEAK)

    def test_industry_exposure_alias_and_signals(self):
        b = battle(
            "Industry Exposure",
            {"internships": "Mandatory"},
            client_reasoning="Tie-ups with 50+ companies.",
            competitor_reasoning="Some guest lectures.",
        )
        assert verdict(b) == (CLIENT, WEAK)
        assert "industryexposure" in SCORING_STRATEGIES


# ─── Agent ───────────────────────────────────────────────────────────────────

class TestDeterministicFeatureScorer:
    def test_unregistered_feature_keeps_model_verdict(self):
        b = battle("Sports", {"teams": 5}, {}, winner=CLIENT, confidence_level=STRONG)
        assert DeterministicFeatureScorer().run([b]) == [b]

    def test_overrides_model_verdict(self):
        b = battle(
            "accreditation", {"naacGrade": "B"}, {"naacGrade": "A++"},
            winner=CLIENT, confidence_level=STRONG,
        )
        scored = DeterministicFeatureScorer().run([b])[0]
        assert (scored.winner, scored.confidence_level) == (COMPETITOR, STRONG)
        assert b.winner == CLIENT   # input untouched

    def test_custom_registry(self):
        scorer = DeterministicFeatureScorer(strategies={"sports": lambda b: (COMPETITOR, WEAK)})
        fees = battle("fees")
        scored = scorer.run([battle("Sports"), fees])
        assert scored[0].winner == COMPETITOR
        assert scored[1] is fees

    def test_order_and_count_preserved(self):
        names = ["fees", "Sports", "placements", "location"]
        scored = DeterministicFeatureScorer().run([battle(n) for n in names])
        assert [b.feature_name for b in scored] == names
