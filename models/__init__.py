"""
Core data models for the College Comparison & AI Visibility parser.
"""

from .schemas import (
    CLIENT,
    COMPETITOR,
    NEUTRAL,
    UNCLEAR,
    WINNERS,
    STRONG,
    MODERATE,
    WEAK,
    CONFIDENCE_LEVELS,
    DataPoints,
    DataValue,
    FeatureBattle,
    ComparisonAnalysis,
    PlacementsData,
    FeesData,
    AccreditationData,
    FacultyData,
    InfrastructureData,
    ReviewsData,
    ProfileSections,
    CompletenessReport,
    ParsedDetailProfile,
    RankedMention,
    VisibilityResult,
)
from .payloads import ComparisonPayload, FeaturePayload

__all__ = [
    "CLIENT", "COMPETITOR", "NEUTRAL", "UNCLEAR", "WINNERS",
    "STRONG", "MODERATE", "WEAK", "CONFIDENCE_LEVELS",
    "DataPoints", "DataValue",
    "FeatureBattle", "ComparisonAnalysis",
    "PlacementsData", "FeesData", "AccreditationData", "FacultyData",
    "InfrastructureData", "ReviewsData", "ProfileSections",
    "CompletenessReport", "ParsedDetailProfile",
    "RankedMention", "VisibilityResult",
    "ComparisonPayload", "FeaturePayload",
]
