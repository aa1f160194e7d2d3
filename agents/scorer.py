"""
Deterministic Feature Scorer
-----------------------------
Recomputes the winner and confidence of every feature battle from the
cleaned data points (and, for soft attributes, the reasoning text),
overriding whatever the model itself declared.

Each attribute has its own pure strategy, registered in
SCORING_STRATEGIES under its normalized name. Attributes without a
strategy keep the model's verdict.

  placements       rate (4) + representative salary (3)
                   + highest package (1) + top-tier recruiters (1)
  fees             lower fee wins; missing data on either side is neutral
  accreditation    NAAC grade ordinal, then NIRF rank
  faculty          indicator fields + reasoning keywords      (weak)
  infrastructure   facility count                              (weak)
  location         connectivity indicator                      (weak)
  industry_exposure indicator fields + reasoning keywords      (weak)

Input:  List[FeatureBattle]
Output: List[FeatureBattle]
"""

import re
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from agents.base import Agent
from agents.cleaning import (
    clean_data_value, has_signal, parse_amount, parse_rank, parse_rate,
    extract_grade_token,
)
from models.schemas import (
    CLIENT, COMPETITOR, NEUTRAL, STRONG, MODERATE, WEAK,
    DataPoints, FeatureBattle,
)

logger = logging.getLogger(__name__)

Verdict = Tuple[str, str]   # (winner, confidence)


class SubComparison(NamedTuple):
    winner: str
    gap: float


# ─── Constants ───────────────────────────────────────────────────────────────

# Intra-attribute signal weights for placements. Kept apart from the
# inter-attribute aggregation weights in config/settings.py.
PLACEMENT_SIGNAL_WEIGHTS: Dict[str, int] = {
    "rate": 4,
    "salary": 3,
    "highest_package": 1,
    "recruiters": 1,
}
PLACEMENT_STRONG_MARGIN = 5

# Representative salary: first non-zero field wins
SALARY_PRIORITY = ("averagePackage", "medianSalary", "highestPackage")
FEE_PRIORITY = ("feeRange", "annualFees")

FEE_NEUTRAL_PCT = 10.0
FEE_STRONG_PCT = 25.0

GRADE_ORDINALS: Dict[str, int] = {
    "A++": 7, "A+": 6, "A": 5, "B++": 4, "B+": 3, "B": 2, "C": 1,
}
ASSUMED_GRADE_GAP = 3       # only one side has a grade
ASSUMED_RANK_GAP = 100      # only one side has a rank
RANK_NEUTRAL_GAP = 10
STRONG_GRADE_GAP = 1        # strictly greater than
STRONG_RANK_GAP = 50        # strictly greater than

TOP_TIER_RECRUITERS = (
    "google", "microsoft", "amazon", "apple", "meta", "facebook",
    "goldman sachs", "morgan stanley", "jpmorgan", "deloitte",
    "mckinsey", "bcg", "bain", "adobe", "samsung", "intel",
    "nvidia", "oracle", "salesforce", "servicenow",
)

_LIST_SPLIT = re.compile(r"\s*[,;]\s*")
_PHD_COUNT = re.compile(r"\d+%?\s*(?:phd|doctorate)")
_TOP_INSTITUTE = re.compile(r"\b(?:iit|nit|iim)s?\b")
_STUDENT_FACULTY_RATIO = re.compile(r"student[\s-]faculty ratio")
_COMPANY_COUNT = re.compile(r"\d+\+?\s*companies")
_PARTNERSHIP = re.compile(r"partnership|collaboration")
_MOU = re.compile(r"\bmous?\b|\btie-?ups?\b")


# ─── Helpers ─────────────────────────────────────────────────────────────────


def normalize_feature_key(feature_name: str) -> str:
    """'Industry Exposure' → 'industry_exposure'."""
    return re.sub(r"[\s-]+", "_", (feature_name or "").strip().lower())


def as_item_list(value: Any) -> List[str]:
    """Cleaned list items; a comma-separated string counts as a list."""
    cleaned = clean_data_value(value)
    if cleaned is None:
        return []
    if isinstance(cleaned, list):
        return [str(v) for v in cleaned]
    if isinstance(cleaned, str):
        return [item for item in _LIST_SPLIT.split(cleaned.strip()) if item]
    return []


def _first_amount(data: DataPoints, keys: Tuple[str, ...]) -> Optional[float]:
    for key in keys:
        amount = parse_amount(data.get(key))
        if amount:
            return amount
    return None


def _higher(client_value: float, competitor_value: float) -> Optional[str]:
    if client_value > competitor_value:
        return CLIENT
    if competitor_value > client_value:
        return COMPETITOR
    return None


def _points_verdict(client_points: float, competitor_points: float) -> Verdict:
    winner = _higher(client_points, competitor_points)
    return (winner or NEUTRAL, WEAK)


# ─── Placements ──────────────────────────────────────────────────────────────


def compare_placement_rates(client: DataPoints, competitor: DataPoints) -> Optional[str]:
    client_rate = parse_rate(client.get("placementRate")) or 0.0
    competitor_rate = parse_rate(competitor.get("placementRate")) or 0.0
    if not client_rate and not competitor_rate:
        return None
    # a side with no rate loses by default to a side that has one
    if not client_rate:
        return COMPETITOR
    if not competitor_rate:
        return CLIENT
    return _higher(client_rate, competitor_rate)


def representative_salary(data: DataPoints) -> float:
    return _first_amount(data, SALARY_PRIORITY) or 0.0


def compare_salaries(client: DataPoints, competitor: DataPoints) -> Optional[str]:
    client_salary = representative_salary(client)
    competitor_salary = representative_salary(competitor)
    if not client_salary and not competitor_salary:
        return None
    if not client_salary:
        return COMPETITOR
    if not competitor_salary:
        return CLIENT
    return _higher(client_salary, competitor_salary)


def count_top_tier_recruiters(value: Any) -> int:
    return sum(
        1 for recruiter in as_item_list(value)
        if any(top in recruiter.lower() for top in TOP_TIER_RECRUITERS)
    )


def compare_recruiters(client: DataPoints, competitor: DataPoints) -> Optional[str]:
    client_count = count_top_tier_recruiters(client.get("topRecruiters"))
    competitor_count = count_top_tier_recruiters(competitor.get("topRecruiters"))
    if client_count == 0 and competitor_count == 0:
        return None
    return _higher(client_count, competitor_count) or NEUTRAL


def score_placements(battle: FeatureBattle) -> Verdict:
    client = battle.client_data_points
    competitor = battle.competitor_data_points
    points = {CLIENT: 0, COMPETITOR: 0, NEUTRAL: 0}

    rate_winner = compare_placement_rates(client, competitor)
    if rate_winner:
        points[rate_winner] += PLACEMENT_SIGNAL_WEIGHTS["rate"]

    salary_winner = compare_salaries(client, competitor)
    if salary_winner:
        points[salary_winner] += PLACEMENT_SIGNAL_WEIGHTS["salary"]

    # strict greater-than only; a missing figure counts as zero
    highest_winner = _higher(
        parse_amount(client.get("highestPackage")) or 0.0,
        parse_amount(competitor.get("highestPackage")) or 0.0,
    )
    if highest_winner:
        points[highest_winner] += PLACEMENT_SIGNAL_WEIGHTS["highest_package"]

    recruiter_winner = compare_recruiters(client, competitor)
    if recruiter_winner:
        points[recruiter_winner] += PLACEMENT_SIGNAL_WEIGHTS["recruiters"]

    diff = abs(points[CLIENT] - points[COMPETITOR])
    if diff == 0:
        return (NEUTRAL, MODERATE)
    winner = CLIENT if points[CLIENT] > points[COMPETITOR] else COMPETITOR
    return (winner, STRONG if diff >= PLACEMENT_STRONG_MARGIN else MODERATE)


# ─── Fees ────────────────────────────────────────────────────────────────────


def fee_figure(data: DataPoints) -> Optional[float]:
    return _first_amount(data, FEE_PRIORITY)


def score_fees(battle: FeatureBattle) -> Verdict:
    client_fee = fee_figure(battle.client_data_points)
    competitor_fee = fee_figure(battle.competitor_data_points)

    # missing data is never a win for the side that has data
    if client_fee is None or competitor_fee is None:
        return (NEUTRAL, WEAK)

    percent_diff = abs(client_fee - competitor_fee) / max(client_fee, competitor_fee) * 100
    if percent_diff < FEE_NEUTRAL_PCT:
        return (NEUTRAL, MODERATE)

    winner = CLIENT if client_fee < competitor_fee else COMPETITOR
    return (winner, STRONG if percent_diff > FEE_STRONG_PCT else MODERATE)


# ─── Accreditation ───────────────────────────────────────────────────────────


def naac_grade(data: DataPoints) -> str:
    raw = clean_data_value(data.get("naacGrade"))
    if raw is None or isinstance(raw, (bool, list)):
        return ""
    grade = str(raw).replace("'", "").replace('"', "").strip().upper()
    if grade and grade not in GRADE_ORDINALS:
        grade = extract_grade_token(grade) or grade
    return grade


def compare_grades(client: DataPoints, competitor: DataPoints) -> Optional[SubComparison]:
    client_grade = naac_grade(client)
    competitor_grade = naac_grade(competitor)

    if not client_grade and not competitor_grade:
        return None
    if client_grade and not competitor_grade:
        return SubComparison(CLIENT, ASSUMED_GRADE_GAP)
    if competitor_grade and not client_grade:
        return SubComparison(COMPETITOR, ASSUMED_GRADE_GAP)

    client_score = GRADE_ORDINALS.get(client_grade, 0)
    competitor_score = GRADE_ORDINALS.get(competitor_grade, 0)
    if client_score == 0 and competitor_score == 0:
        return None

    gap = abs(client_score - competitor_score)
    return SubComparison(_higher(client_score, competitor_score) or NEUTRAL, gap)


def compare_ranks(client: DataPoints, competitor: DataPoints) -> Optional[SubComparison]:
    client_rank = parse_rank(client.get("nirfRank"))
    competitor_rank = parse_rank(competitor.get("nirfRank"))

    if client_rank is None and competitor_rank is None:
        return None
    if competitor_rank is None:
        return SubComparison(CLIENT, ASSUMED_RANK_GAP)
    if client_rank is None:
        return SubComparison(COMPETITOR, ASSUMED_RANK_GAP)

    gap = abs(client_rank - competitor_rank)
    if gap < RANK_NEUTRAL_GAP:
        return SubComparison(NEUTRAL, gap)
    # lower rank is better
    return SubComparison(CLIENT if client_rank < competitor_rank else COMPETITOR, gap)


def score_accreditation(battle: FeatureBattle) -> Verdict:
    grade = compare_grades(battle.client_data_points, battle.competitor_data_points)
    rank = compare_ranks(battle.client_data_points, battle.competitor_data_points)

    if grade and rank and grade.winner == NEUTRAL and rank.winner == NEUTRAL:
        return (NEUTRAL, STRONG)
    if grade and grade.gap > STRONG_GRADE_GAP:
        return (grade.winner, STRONG)
    if rank and rank.gap > STRONG_RANK_GAP:
        return (rank.winner, STRONG)
    if grade and grade.winner != NEUTRAL:
        return (grade.winner, MODERATE)
    if rank and rank.winner != NEUTRAL:
        return (rank.winner, MODERATE)
    return (NEUTRAL, MODERATE)


# ─── Soft Attributes ─────────────────────────────────────────────────────────


def faculty_points(data: DataPoints, reasoning: str) -> float:
    score = 0.0
    for key in ("quality", "qualifications", "industryExperience"):
        if has_signal(data.get(key)):
            score += 1

    lower = (reasoning or "").lower()
    if _PHD_COUNT.search(lower):
        score += 2
    elif "phd" in lower:
        score += 1
    if _TOP_INSTITUTE.search(lower):
        score += 1
    if "industry experience" in lower:
        score += 1
    if "experienced" in lower:
        score += 0.5
    if "qualified" in lower:
        score += 0.5
    if _STUDENT_FACULTY_RATIO.search(lower):
        score += 0.5
    return score


def score_faculty(battle: FeatureBattle) -> Verdict:
    return _points_verdict(
        faculty_points(battle.client_data_points, battle.client_reasoning),
        faculty_points(battle.competitor_data_points, battle.competitor_reasoning),
    )


def score_infrastructure(battle: FeatureBattle) -> Verdict:
    return _points_verdict(
        len(as_item_list(battle.client_data_points.get("facilities"))),
        len(as_item_list(battle.competitor_data_points.get("facilities"))),
    )


def score_location(battle: FeatureBattle) -> Verdict:
    client_connected = has_signal(battle.client_data_points.get("connectivity"))
    competitor_connected = has_signal(battle.competitor_data_points.get("connectivity"))
    if client_connected and not competitor_connected:
        return (CLIENT, WEAK)
    if competitor_connected and not client_connected:
        return (COMPETITOR, WEAK)
    return (NEUTRAL, WEAK)


def industry_exposure_points(data: DataPoints, reasoning: str) -> float:
    score = 0.0
    for key in ("internships", "partnerships", "liveProjects"):
        if has_signal(data.get(key)):
            score += 1

    lower = (reasoning or "").lower()
    if _COMPANY_COUNT.search(lower):
        score += 2
    if _PARTNERSHIP.search(lower):
        score += 1
    if "internship" in lower:
        score += 1
    if "100%" in lower:
        score += 1
    if _MOU.search(lower):
        score += 1
    return score


def score_industry_exposure(battle: FeatureBattle) -> Verdict:
    return _points_verdict(
        industry_exposure_points(battle.client_data_points, battle.client_reasoning),
        industry_exposure_points(battle.competitor_data_points, battle.competitor_reasoning),
    )


# ─── Strategy Registry ───────────────────────────────────────────────────────

ScoringStrategy = Callable[[FeatureBattle], Verdict]

SCORING_STRATEGIES: Dict[str, ScoringStrategy] = {
    "placements": score_placements,
    "fees": score_fees,
    "accreditation": score_accreditation,
    "faculty": score_faculty,
    "infrastructure": score_infrastructure,
    "location": score_location,
    "industry_exposure": score_industry_exposure,
    "industryexposure": score_industry_exposure,
}


def score_battle(
    battle: FeatureBattle,
    strategies: Optional[Dict[str, ScoringStrategy]] = None,
) -> FeatureBattle:
    """Apply the registered strategy for the battle's attribute, if any."""
    strategies = SCORING_STRATEGIES if strategies is None else strategies
    strategy = strategies.get(normalize_feature_key(battle.feature_name))
    if strategy is None:
        return battle
    winner, confidence = strategy(battle)
    return replace(battle, winner=winner, confidence_level=confidence)


# ─── DeterministicFeatureScorer ──────────────────────────────────────────────


class DeterministicFeatureScorer(Agent):
    """
    Agent 3: Deterministic Scoring

    Overrides the model's stated winner with a rule-based verdict for
    every attribute that has a registered strategy.
    """

    def __init__(
        self,
        strategies: Optional[Dict[str, ScoringStrategy]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="DeterministicFeatureScorer", logger=logger)
        self.strategies = dict(SCORING_STRATEGIES if strategies is None else strategies)

    def run(self, battles: List[FeatureBattle]) -> List[FeatureBattle]:
        scored: List[FeatureBattle] = []
        for battle in battles:
            result = score_battle(battle, self.strategies)
            if result is not battle:
                self.logger.debug(
                    f"  📊 {battle.feature_name}: {result.winner} ({result.confidence_level})"
                    + (f" [model said {battle.winner}]" if battle.winner != result.winner else "")
                )
            scored.append(result)
        return scored
