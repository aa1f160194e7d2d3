"""
Pipeline runners — the public entry points. Each wires its agents into an
Orchestrator and always returns a well-typed result; none of them raise.

Architecture:
  comparison:  StructuredResponseExtractor → FieldNormalizer →
               DeterministicFeatureScorer → DataGapAnalyzer →
               WeightedOutcomeAggregator
               (any failure → FallbackTextAnalyzer)
  visibility:  RankedMentionExtractor (TextEntityMatcher)
  detail:      StructuredResponseExtractor → DetailProfileParser
               (any failure → empty profile)
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from agents.base import Orchestrator
from agents.extractor import StructuredResponseExtractor
from agents.normalizer import FieldNormalizer
from agents.scorer import DeterministicFeatureScorer
from agents.gap_detector import DataGapAnalyzer
from agents.aggregator import WeightedOutcomeAggregator
from agents.fallback import FallbackTextAnalyzer
from agents.mentions import MentionQuery, RankedMentionExtractor
from agents.detail_parser import DetailProfileParser, empty_profile
from models.schemas import (
    UNCLEAR, ComparisonAnalysis, ParsedDetailProfile, VisibilityResult,
)


def build_comparison_pipeline(log: Optional[logging.Logger] = None) -> Orchestrator:
    return Orchestrator([
        StructuredResponseExtractor(logger=log),
        FieldNormalizer(logger=log),
        DeterministicFeatureScorer(logger=log),
        DataGapAnalyzer(logger=log),
        WeightedOutcomeAggregator(logger=log),
    ], logger=log)


def parse_comparison_response(
    raw_text: str,
    client_name: str,
    competitor_name: str,
    logger: Optional[logging.Logger] = None,
) -> ComparisonAnalysis:
    """
    Parse a client-vs-competitor model response into a ComparisonAnalysis.

    When no structured JSON can be recovered (or a stage fails), the
    result comes from name-mention counting with `used_fallback=True`.
    """
    log = logger or logging.getLogger(__name__)
    log.info(f"🔍 Parsing comparison: {client_name} vs {competitor_name}")

    pipeline = build_comparison_pipeline(logger)
    result = pipeline.execute(raw_text)
    if result.success:
        return result.data

    log.warning(f"Comparison pipeline stopped at {pipeline.failed_agent}: {result.error}")
    log.debug(pipeline.summary())
    fallback = FallbackTextAnalyzer(client_name, competitor_name, logger=logger).execute(raw_text)
    if fallback.success:
        return fallback.data

    return ComparisonAnalysis(
        features=[],
        overall_winner=UNCLEAR,
        summary=f"Fallback parsing failed: {fallback.error}",
        used_fallback=True,
    )


def parse_visibility_response(
    raw_text: str,
    known_names: Sequence[str],
    logger: Optional[logging.Logger] = None,
) -> VisibilityResult:
    """Extract ranked mentions of `known_names` from a free-text answer."""
    query = MentionQuery(
        text=raw_text if isinstance(raw_text, str) else "",
        known_names=list(known_names or []),
    )
    result = RankedMentionExtractor(logger=logger).execute(query)
    if result.success:
        return result.data
    return VisibilityResult(mentions=[])


def parse_detail_response(
    raw_text: str,
    college_name: str,
    logger: Optional[logging.Logger] = None,
) -> ParsedDetailProfile:
    """Parse a single-college detail response; failures give an empty profile."""
    log = logger or logging.getLogger(__name__)
    log.info(f"🔍 Parsing detail response for: {college_name}")

    pipeline = Orchestrator([
        StructuredResponseExtractor(logger=logger),
        DetailProfileParser(college_name, logger=logger),
    ], logger=logger)
    result = pipeline.execute(raw_text)
    if result.success:
        return result.data

    log.warning(f"⚠️ Could not extract JSON for {college_name} — returning empty profile")
    return empty_profile(college_name)
