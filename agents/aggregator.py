"""
Weighted Outcome Aggregator
----------------------------
Combines the per-attribute verdicts into one overall winner:

  effective_weight_i = base_weight(feature_i) · multiplier(confidence_i)
  ClientTotal        = Σ effective_weight_i  over battles the client won
  CompetitorTotal    = Σ effective_weight_i  over battles the competitor won

  overall = neutral               if |ClientTotal − CompetitorTotal| < margin
            argmax(totals)        otherwise

Neutral and unclear battles contribute to neither side. Also writes the
human-readable summary of the analysis.

Input:  List[FeatureBattle]
Output: ComparisonAnalysis
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from agents.base import Agent
from agents.scorer import normalize_feature_key
from config.settings import settings
from models.schemas import (
    CLIENT, COMPETITOR, NEUTRAL, ComparisonAnalysis, FeatureBattle,
)

logger = logging.getLogger(__name__)


def build_summary(features: List[FeatureBattle], overall_winner: str) -> str:
    client_wins = [f.feature_name for f in features if f.winner == CLIENT]
    competitor_wins = [f.feature_name for f in features if f.winner == COMPETITOR]
    gaps = [
        f"{f.feature_name}: {f.data_gap_identified}"
        for f in features if f.data_gap_identified
    ]

    if overall_winner == CLIENT:
        summary = f"Client wins overall. Strengths: {', '.join(client_wins) or 'none'}."
    elif overall_winner == COMPETITOR:
        summary = f"Competitor wins overall. Their strengths: {', '.join(competitor_wins) or 'none'}."
    else:
        summary = "Highly competitive matchup."

    if client_wins and overall_winner != CLIENT:
        summary += f" Client strengths: {', '.join(client_wins)}."
    if competitor_wins and overall_winner != COMPETITOR:
        summary += f" Competitor strengths: {', '.join(competitor_wins)}."
    if gaps:
        summary += f" Data gaps: {'; '.join(gaps)}."
    return summary


class WeightedOutcomeAggregator(Agent):
    """
    Agent 5: Weighted Aggregation

    Base weights, confidence multipliers and the neutral margin default to
    config.settings and can be overridden per instance.
    """

    def __init__(
        self,
        feature_weights: Optional[Dict[str, float]] = None,
        confidence_multipliers: Optional[Dict[str, float]] = None,
        default_weight: float = settings.DEFAULT_FEATURE_WEIGHT,
        default_multiplier: float = settings.DEFAULT_CONFIDENCE_MULTIPLIER,
        neutral_margin: float = settings.NEUTRAL_MARGIN,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="WeightedOutcomeAggregator", logger=logger)
        self.feature_weights = {
            normalize_feature_key(k): v
            for k, v in (feature_weights or settings.FEATURE_WEIGHTS).items()
        }
        self.confidence_multipliers = dict(confidence_multipliers or settings.CONFIDENCE_MULTIPLIERS)
        self.default_weight = default_weight
        self.default_multiplier = default_multiplier
        self.neutral_margin = neutral_margin

    def base_weight(self, feature_name: str) -> float:
        key = normalize_feature_key(feature_name)
        if key == "industryexposure":
            key = "industry_exposure"
        return self.feature_weights.get(key, self.default_weight)

    def effective_weight(self, battle: FeatureBattle) -> float:
        multiplier = self.confidence_multipliers.get(battle.confidence_level, self.default_multiplier)
        return self.base_weight(battle.feature_name) * multiplier

    def weighted_totals(self, battles: List[FeatureBattle]) -> Tuple[float, float]:
        if not battles:
            return 0.0, 0.0
        weights = np.array([self.effective_weight(b) for b in battles], dtype=float)
        winners = np.array([b.winner for b in battles])
        client_total = float(weights[winners == CLIENT].sum())
        competitor_total = float(weights[winners == COMPETITOR].sum())
        return client_total, competitor_total

    def decide(self, client_total: float, competitor_total: float) -> str:
        if abs(client_total - competitor_total) < self.neutral_margin:
            return NEUTRAL
        return CLIENT if client_total > competitor_total else COMPETITOR

    def run(self, battles: List[FeatureBattle]) -> ComparisonAnalysis:
        client_total, competitor_total = self.weighted_totals(battles)
        overall = self.decide(client_total, competitor_total)

        self.logger.info(
            f"  🏆 Weighted scores — Client: {client_total:.1f}, "
            f"Competitor: {competitor_total:.1f} → {overall}"
        )
        self._log_breakdown(battles)

        return ComparisonAnalysis(
            features=list(battles),
            overall_winner=overall,
            summary=build_summary(battles, overall),
            client_weighted_score=client_total,
            competitor_weighted_score=competitor_total,
        )

    def _log_breakdown(self, battles: List[FeatureBattle]):
        for label, winner in (("Client wins", CLIENT), ("Competitor wins", COMPETITOR), ("Neutral", NEUTRAL)):
            names = [b.feature_name for b in battles if b.winner == winner]
            self.logger.debug(f"  📊 {label}: {', '.join(names) or 'none'}")
