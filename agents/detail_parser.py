"""
Detail Profile Parser
----------------------
Reads the single-college "detail" JSON into the six typed profile
sections and scores its completeness.

Every field is read defensively: a section that is not an object is
None, placeholder strings are None, booleans accept "true"/"false", and
only http(s) URLs survive in `sources`.

Input:  Dict[str, Any] (parsed JSON)
Output: ParsedDetailProfile
"""

import logging
from typing import Any, Dict, List, Optional

from agents.base import Agent
from agents.completeness import PROFILE_FIELD_NAMES, ProfileCompletenessScorer
from models.schemas import (
    AccreditationData, FacultyData, FeesData, InfrastructureData,
    ParsedDetailProfile, PlacementsData, ProfileSections, ReviewsData,
)

logger = logging.getLogger(__name__)

EMPTY_STRINGS = frozenset({"null", "n/a", "not available", "not specified", "unknown", "-", ""})
VALID_SENTIMENTS = ("positive", "negative", "mixed")


# ─── Field readers ───────────────────────────────────────────────────────────


def read_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value).strip()
    return None if text.lower() in EMPTY_STRINGS else text


def read_str_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [v for v in value if isinstance(v, str) and v.strip()]
    return items or None


def read_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def read_sources(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [s for s in value if isinstance(s, str) and s.startswith("http")]


# ─── Section readers ─────────────────────────────────────────────────────────


def parse_placements(raw: Any) -> Optional[PlacementsData]:
    if not isinstance(raw, dict):
        return None
    return PlacementsData(
        placement_rate=read_str(raw.get("placementRate")),
        average_package=read_str(raw.get("averagePackage")),
        highest_package=read_str(raw.get("highestPackage")),
        top_recruiters=read_str_list(raw.get("topRecruiters")),
        batch_year=read_str(raw.get("batchYear")),
    )


def parse_fees(raw: Any) -> Optional[FeesData]:
    if not isinstance(raw, dict):
        return None
    return FeesData(
        btech_annual=read_str(raw.get("btechAnnual")),
        hostel=read_str(raw.get("hostel")),
        total_program=read_str(raw.get("totalProgram")),
    )


def parse_accreditation(raw: Any) -> Optional[AccreditationData]:
    if not isinstance(raw, dict):
        return None
    return AccreditationData(
        naac_grade=read_str(raw.get("naacGrade")),
        nirf_rank=read_str(raw.get("nirfRank")),
        nba_accredited=read_bool(raw.get("nbaAccredited")),
        ugc_recognized=read_bool(raw.get("ugcRecognized")),
    )


def parse_faculty(raw: Any) -> Optional[FacultyData]:
    if not isinstance(raw, dict):
        return None
    return FacultyData(
        total_faculty=read_str(raw.get("totalFaculty")),
        phd_percentage=read_str(raw.get("phdPercentage")),
        student_faculty_ratio=read_str(raw.get("studentFacultyRatio")),
    )


def parse_infrastructure(raw: Any) -> Optional[InfrastructureData]:
    if not isinstance(raw, dict):
        return None
    return InfrastructureData(
        campus_size=read_str(raw.get("campusSize")),
        facilities=read_str_list(raw.get("facilities")),
        hostel_available=read_bool(raw.get("hostelAvailable")),
    )


def parse_reviews(raw: Any) -> Optional[ReviewsData]:
    if not isinstance(raw, dict):
        return None
    sentiment = raw.get("overallSentiment")
    if isinstance(sentiment, str):
        sentiment = sentiment.strip().lower()
    return ReviewsData(
        overall_sentiment=sentiment if sentiment in VALID_SENTIMENTS else None,
        common_praises=read_str_list(raw.get("commonPraises")),
        common_complaints=read_str_list(raw.get("commonComplaints")),
        average_rating=read_str(raw.get("averageRating")),
    )


def empty_profile(college_name: str) -> ParsedDetailProfile:
    return ParsedDetailProfile(
        college_name=college_name,
        placements_data=None,
        fees_data=None,
        accreditation_data=None,
        faculty_data=None,
        infrastructure_data=None,
        reviews_data=None,
        sources=[],
        data_completeness_score=0,
        fields_populated=0,
        fields_total=len(PROFILE_FIELD_NAMES),
        missing_fields=list(PROFILE_FIELD_NAMES),
    )


# ─── DetailProfileParser ─────────────────────────────────────────────────────


class DetailProfileParser(Agent):
    """Agent: detail JSON → ParsedDetailProfile with completeness score."""

    def __init__(self, college_name: str, logger: Optional[logging.Logger] = None):
        super().__init__(name="DetailProfileParser", logger=logger)
        self.college_name = college_name
        self.completeness = ProfileCompletenessScorer(logger=logger)

    def run(self, data: Dict[str, Any]) -> ParsedDetailProfile:
        sections = ProfileSections(
            placements=parse_placements(data.get("placements")),
            fees=parse_fees(data.get("fees")),
            accreditation=parse_accreditation(data.get("accreditation")),
            faculty=parse_faculty(data.get("faculty")),
            infrastructure=parse_infrastructure(data.get("infrastructure")),
            reviews=parse_reviews(data.get("reviews")),
        )
        report = self.completeness.run(sections)

        override = data.get("collegeName")
        name = override.strip() if isinstance(override, str) and override.strip() else self.college_name

        self.logger.info(
            f"📊 {name}: {report.fields_populated}/{report.fields_total} fields populated "
            f"({report.score}% complete) | Missing: [{', '.join(report.missing_fields)}]"
        )

        return ParsedDetailProfile(
            college_name=name,
            placements_data=sections.placements,
            fees_data=sections.fees,
            accreditation_data=sections.accreditation,
            faculty_data=sections.faculty,
            infrastructure_data=sections.infrastructure,
            reviews_data=sections.reviews,
            sources=read_sources(data.get("sources")),
            data_completeness_score=report.score,
            fields_populated=report.fields_populated,
            fields_total=report.fields_total,
            missing_fields=report.missing_fields,
        )
