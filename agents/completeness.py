"""
Profile Completeness Scorer
----------------------------
Scores how much of the fixed 20-field detail profile the model filled in:

  score = round(populated / 20 · 100)

A field is populated when it is a non-blank string, a non-empty list, a
number, or any boolean (False is still a data point).

Input:  ProfileSections
Output: CompletenessReport
"""

import logging
from typing import Any, List, Optional, Tuple

from agents.base import Agent
from models.schemas import CompletenessReport, ProfileSections

logger = logging.getLogger(__name__)

# (section attribute, field attribute, wire name), in report order
PROFILE_SCHEMA: Tuple[Tuple[str, str, str], ...] = (
    ("placements", "placement_rate", "placementRate"),
    ("placements", "average_package", "averagePackage"),
    ("placements", "highest_package", "highestPackage"),
    ("placements", "top_recruiters", "topRecruiters"),
    ("placements", "batch_year", "batchYear"),
    ("fees", "btech_annual", "btechAnnual"),
    ("fees", "hostel", "hostel"),
    ("fees", "total_program", "totalProgram"),
    ("accreditation", "naac_grade", "naacGrade"),
    ("accreditation", "nirf_rank", "nirfRank"),
    ("accreditation", "nba_accredited", "nbaAccredited"),
    ("accreditation", "ugc_recognized", "ugcRecognized"),
    ("faculty", "total_faculty", "totalFaculty"),
    ("faculty", "phd_percentage", "phdPercentage"),
    ("faculty", "student_faculty_ratio", "studentFacultyRatio"),
    ("infrastructure", "campus_size", "campusSize"),
    ("infrastructure", "facilities", "facilities"),
    ("infrastructure", "hostel_available", "hostelAvailable"),
    ("reviews", "overall_sentiment", "overallSentiment"),
    ("reviews", "average_rating", "averageRating"),
)

PROFILE_FIELD_NAMES: List[str] = [wire for _, _, wire in PROFILE_SCHEMA]


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return isinstance(value, (int, float))


def score_completeness(sections: ProfileSections) -> CompletenessReport:
    missing: List[str] = []
    for section_attr, field_attr, wire_name in PROFILE_SCHEMA:
        section = getattr(sections, section_attr)
        value = getattr(section, field_attr) if section is not None else None
        if not has_value(value):
            missing.append(wire_name)

    total = len(PROFILE_SCHEMA)
    populated = total - len(missing)
    return CompletenessReport(
        score=int(round(populated / total * 100)),
        fields_populated=populated,
        fields_total=total,
        missing_fields=missing,
    )


class ProfileCompletenessScorer(Agent):
    """Agent: tally presence across the 20-field profile schema."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(name="ProfileCompletenessScorer", logger=logger)

    def run(self, sections: ProfileSections) -> CompletenessReport:
        report = score_completeness(sections)
        self.logger.debug(
            f"📊 {report.fields_populated}/{report.fields_total} fields populated "
            f"({report.score}% complete)"
        )
        return report
