from .base import Agent, AgentResult, Orchestrator
from .errors import ParserError, ExtractionError, PayloadError
from .extractor import StructuredResponseExtractor
from .normalizer import FieldNormalizer
from .scorer import DeterministicFeatureScorer, SCORING_STRATEGIES
from .gap_detector import DataGapAnalyzer
from .aggregator import WeightedOutcomeAggregator
from .fallback import FallbackTextAnalyzer
from .matcher import TextEntityMatcher
from .mentions import MentionQuery, RankedMentionExtractor
from .completeness import ProfileCompletenessScorer
from .detail_parser import DetailProfileParser

__all__ = [
    "Agent", "AgentResult", "Orchestrator",
    "ParserError", "ExtractionError", "PayloadError",
    "StructuredResponseExtractor", "FieldNormalizer",
    "DeterministicFeatureScorer", "SCORING_STRATEGIES",
    "DataGapAnalyzer", "WeightedOutcomeAggregator", "FallbackTextAnalyzer",
    "TextEntityMatcher", "MentionQuery", "RankedMentionExtractor",
    "ProfileCompletenessScorer", "DetailProfileParser",
]
