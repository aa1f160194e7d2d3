"""
Core data models / schemas for the College Comparison & AI Visibility parser.

Every result object is an immutable value produced per parse call; the
caller owns persistence. ``to_dict()`` renders the camelCase shape the
rest of the platform stores.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

CLIENT = "client"
COMPETITOR = "competitor"
NEUTRAL = "neutral"
UNCLEAR = "unclear"

WINNERS = (CLIENT, COMPETITOR, NEUTRAL, UNCLEAR)

STRONG = "strong"
MODERATE = "moderate"
WEAK = "weak"

CONFIDENCE_LEVELS = (STRONG, MODERATE, WEAK)

# Data points are model-defined: an open map of scalars or scalar lists
Scalar = Union[str, int, float, bool]
DataValue = Union[Scalar, List[Scalar], None]
DataPoints = Dict[str, DataValue]


# ---------------------------------------------------------------------------
# Comparison pipeline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FeatureBattle:
    """One attribute-level comparison between the client and a competitor."""
    feature_name: str
    winner: str = UNCLEAR                   # one of WINNERS
    confidence_level: str = WEAK            # one of CONFIDENCE_LEVELS
    client_reasoning: str = ""
    competitor_reasoning: str = ""
    client_data_points: DataPoints = field(default_factory=dict)
    competitor_data_points: DataPoints = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)
    data_gap_identified: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "featureName": self.feature_name,
            "winner": self.winner,
            "confidenceLevel": self.confidence_level,
            "clientReasoning": self.client_reasoning,
            "competitorReasoning": self.competitor_reasoning,
            "clientDataPoints": dict(self.client_data_points),
            "competitorDataPoints": dict(self.competitor_data_points),
            "sources": list(self.sources),
            "dataGapIdentified": self.data_gap_identified,
        }


@dataclass(frozen=True)
class ComparisonAnalysis:
    """Full client-vs-competitor judgment for one model response."""
    features: List[FeatureBattle]
    overall_winner: str
    summary: str
    client_weighted_score: float = 0.0
    competitor_weighted_score: float = 0.0
    used_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "features": [f.to_dict() for f in self.features],
            "overallWinner": self.overall_winner,
            "summary": self.summary,
            "clientWeightedScore": round(self.client_weighted_score, 4),
            "competitorWeightedScore": round(self.competitor_weighted_score, 4),
            "usedFallback": self.used_fallback,
        }


# ---------------------------------------------------------------------------
# Detail profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlacementsData:
    placement_rate: Optional[str] = None
    average_package: Optional[str] = None
    highest_package: Optional[str] = None
    top_recruiters: Optional[List[str]] = None
    batch_year: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "placementRate": self.placement_rate,
            "averagePackage": self.average_package,
            "highestPackage": self.highest_package,
            "topRecruiters": self.top_recruiters,
            "batchYear": self.batch_year,
        }


@dataclass(frozen=True)
class FeesData:
    btech_annual: Optional[str] = None
    hostel: Optional[str] = None
    total_program: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "btechAnnual": self.btech_annual,
            "hostel": self.hostel,
            "totalProgram": self.total_program,
        }


@dataclass(frozen=True)
class AccreditationData:
    naac_grade: Optional[str] = None
    nirf_rank: Optional[str] = None
    nba_accredited: Optional[bool] = None
    ugc_recognized: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "naacGrade": self.naac_grade,
            "nirfRank": self.nirf_rank,
            "nbaAccredited": self.nba_accredited,
            "ugcRecognized": self.ugc_recognized,
        }


@dataclass(frozen=True)
class FacultyData:
    total_faculty: Optional[str] = None
    phd_percentage: Optional[str] = None
    student_faculty_ratio: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFaculty": self.total_faculty,
            "phdPercentage": self.phd_percentage,
            "studentFacultyRatio": self.student_faculty_ratio,
        }


@dataclass(frozen=True)
class InfrastructureData:
    campus_size: Optional[str] = None
    facilities: Optional[List[str]] = None
    hostel_available: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campusSize": self.campus_size,
            "facilities": self.facilities,
            "hostelAvailable": self.hostel_available,
        }


@dataclass(frozen=True)
class ReviewsData:
    overall_sentiment: Optional[str] = None     # positive | negative | mixed
    common_praises: Optional[List[str]] = None
    common_complaints: Optional[List[str]] = None
    average_rating: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallSentiment": self.overall_sentiment,
            "commonPraises": self.common_praises,
            "commonComplaints": self.common_complaints,
            "averageRating": self.average_rating,
        }


@dataclass(frozen=True)
class ProfileSections:
    """The six optional sections of a detail profile."""
    placements: Optional[PlacementsData] = None
    fees: Optional[FeesData] = None
    accreditation: Optional[AccreditationData] = None
    faculty: Optional[FacultyData] = None
    infrastructure: Optional[InfrastructureData] = None
    reviews: Optional[ReviewsData] = None


@dataclass(frozen=True)
class CompletenessReport:
    score: int                  # 0-100
    fields_populated: int
    fields_total: int
    missing_fields: List[str]


@dataclass(frozen=True)
class ParsedDetailProfile:
    college_name: str
    placements_data: Optional[PlacementsData]
    fees_data: Optional[FeesData]
    accreditation_data: Optional[AccreditationData]
    faculty_data: Optional[FacultyData]
    infrastructure_data: Optional[InfrastructureData]
    reviews_data: Optional[ReviewsData]
    sources: List[str]
    data_completeness_score: int
    fields_populated: int
    fields_total: int
    missing_fields: List[str]

    def to_dict(self) -> Dict[str, Any]:
        def section(data):
            return data.to_dict() if data is not None else None

        return {
            "collegeName": self.college_name,
            "placementsData": section(self.placements_data),
            "feesData": section(self.fees_data),
            "accreditationData": section(self.accreditation_data),
            "facultyData": section(self.faculty_data),
            "infrastructureData": section(self.infrastructure_data),
            "reviewsData": section(self.reviews_data),
            "sources": list(self.sources),
            "dataCompletenessScore": self.data_completeness_score,
            "fieldsPopulated": self.fields_populated,
            "fieldsTotal": self.fields_total,
            "missingFields": list(self.missing_fields),
        }


# ---------------------------------------------------------------------------
# Visibility pipeline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RankedMention:
    name: str                   # canonical, resolved name
    rank: int                   # as stated by the source text
    context: str                # bounded text window
    section: str = "General"
    section_tier: str = "unknown"
    reasoning: str = ""
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    sources_cited: List[str] = field(default_factory=list)
    signal_score: int = 0
    response_richness_score: int = 0    # 0-10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rank": self.rank,
            "context": self.context,
            "section": self.section,
            "sectionTier": self.section_tier,
            "reasoning": self.reasoning,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "sourcesCited": list(self.sources_cited),
            "signalScore": self.signal_score,
            "responseRichnessScore": self.response_richness_score,
        }


@dataclass(frozen=True)
class VisibilityResult:
    mentions: List[RankedMention]
    entries_detected: int = 0
    sources_cited: List[str] = field(default_factory=list)
    ranking_factors: List[str] = field(default_factory=list)
    used_fallback: bool = False

    @property
    def total_count(self) -> int:
        return len(self.mentions)

    def find(self, name: str) -> Optional[RankedMention]:
        lowered = name.lower()
        return next((m for m in self.mentions if m.name.lower() == lowered), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mentions": [m.to_dict() for m in self.mentions],
            "totalCount": self.total_count,
            "entriesDetected": self.entries_detected,
            "sourcesCited": list(self.sources_cited),
            "rankingFactors": list(self.ranking_factors),
            "usedFallback": self.used_fallback,
        }
