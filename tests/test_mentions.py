"""
Fuzzy name resolution and ranked mention extraction tests.
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from agents.matcher import TextEntityMatcher
from agents.mentions import (
    MentionQuery, RankedMentionExtractor, classify_section, clean_entity_name,
    parse_list_entry,
)
from utils.pipeline import parse_visibility_response


KNOWN = [
    "Delhi Technological University",
    "XYZ Institute of Technology",
    "Netaji Subhas University of Technology",
]

RANKED_ANSWER = """## Top Engineering Colleges

1. **Delhi Technological University** (NIRF #27): Strong placements.
   Average package 12 LPA.
2. **XYZ Institute of Tech** (Rank #3) – Affordable fees.
3. Unknown Academy of Arts: Not relevant.
4. **Delhi Technological University**: repeated entry.

### Other Options
5) Netaji Subhas University of Technology - good campus
"""


# ─── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def matcher():
    return TextEntityMatcher(KNOWN)


@pytest.fixture
def ranked_result():
    return RankedMentionExtractor().run(MentionQuery(RANKED_ANSWER, KNOWN))


# ─── TextEntityMatcher ───────────────────────────────────────────────────────

class TestTextEntityMatcher:
    def test_exact_match_ignores_case_and_spacing(self, matcher):
        assert matcher.match("xyz   institute OF technology") == "XYZ Institute of Technology"

    def test_known_name_contains_candidate(self, matcher):
        assert matcher.match(clean_entity_name("XYZ Institute of Tech (Rank #3)")) == "XYZ Institute of Technology"

    def test_candidate_contains_known_name(self):
        m = TextEntityMatcher(["Amity University"])
        assert m.match("Amity University Noida Campus") == "Amity University"

    def test_token_overlap(self):
        m = TextEntityMatcher(["Guru Gobind Singh Indraprastha University"])
        assert m.match("GGS Indraprastha University Delhi") == "Guru Gobind Singh Indraprastha University"

    def test_single_shared_token_is_not_enough(self, matcher):
        assert matcher.match("Delhi Public School") is None

    @pytest.mark.parametrize("candidate", ["", "IT", "  a "])
    def test_short_candidates_never_match(self, matcher, candidate):
        assert matcher.match(candidate) is None

    def test_first_known_name_wins_within_tier(self):
        m = TextEntityMatcher(["Amity University", "Amity University Noida"])
        assert m.match("Amity University Noida Campus") == "Amity University"


# ─── Line parsing ────────────────────────────────────────────────────────────

class TestListEntries:
    def test_clean_entity_name(self):
        assert clean_entity_name("**XYZ Institute of Tech** (Rank #3)") == "XYZ Institute of Tech"
        assert clean_entity_name("[ABC College](https://abc.edu)") == "ABC College"
        assert clean_entity_name("ABC College – Delhi") == "ABC College"

    @pytest.mark.parametrize("line,rank,name", [
        ("1. **Delhi Technological University**: top pick", 1, "Delhi Technological University"),
        ("2) ABC College, Noida", 2, "ABC College"),
        ("3. ABC College | NAAC A", 3, "ABC College"),
        ("4. ABC College - Greater Noida", 4, "ABC College"),
        ("12. ABC College (Shiksha, 2024); private", 12, "ABC College"),
    ])
    def test_entry_lines(self, line, rank, name):
        entry = parse_list_entry(line, 0)
        assert (entry.rank, entry.raw_name) == (rank, name)

    @pytest.mark.parametrize("line", ["- ABC College", "Some prose line", "2024 was a good year"])
    def test_non_entries(self, line):
        assert parse_list_entry(line, 0) is None

    def test_section_classification(self):
        assert classify_section("Top Engineering Colleges") == "best_overall"
        assert classify_section("Good Private Options") == "strong_private"
        assert classify_section("Universities with Engineering") == "universities_with_engineering"
        assert classify_section("Other Options") == "other_options"
        assert classify_section("Summary") == "unknown"


# ─── RankedMentionExtractor ──────────────────────────────────────────────────

class TestRankedMentionExtractor:
    def test_ranks_as_stated(self, ranked_result):
        assert [(m.name, m.rank) for m in ranked_result.mentions] == [
            ("Delhi Technological University", 1),
            ("XYZ Institute of Technology", 2),
            ("Netaji Subhas University of Technology", 5),
        ]

    def test_counts(self, ranked_result):
        assert ranked_result.total_count == 3
        assert ranked_result.entries_detected == 5
        assert not ranked_result.used_fallback

    def test_context_window(self, ranked_result):
        context = ranked_result.find("Delhi Technological University").context
        assert context.startswith("Delhi Technological University (NIRF #27)")
        assert "12 LPA" in context
        assert "**" not in context

    def test_context_bounded(self):
        text = "1. **XYZ Institute of Technology**: " + "great campus " * 60
        result = RankedMentionExtractor().run(MentionQuery(text, KNOWN))
        assert len(result.mentions[0].context) == 300

    def test_sections_and_tiers(self, ranked_result):
        first = ranked_result.find("Delhi Technological University")
        last = ranked_result.find("Netaji Subhas University of Technology")
        assert (first.section, first.section_tier) == ("Top Engineering Colleges", "best_overall")
        assert (last.section, last.section_tier) == ("Other Options", "other_options")

    def test_sources_and_factors(self, ranked_result):
        assert ranked_result.sources_cited == ["NIRF"]
        assert "placement" in ranked_result.ranking_factors
        assert "fees" in ranked_result.ranking_factors

    def test_whole_text_fallback_orders_by_first_occurrence(self):
        text = (
            "Students often compare Amity University with XYZ Institute of Technology.\n"
            "XYZ Institute of Technology has better labs."
        )
        result = RankedMentionExtractor().run(MentionQuery(
            text, ["XYZ Institute of Technology", "Amity University", "Missing College"],
        ))
        assert [(m.name, m.rank) for m in result.mentions] == [
            ("Amity University", 1),
            ("XYZ Institute of Technology", 2),
        ]
        assert result.used_fallback
        assert result.entries_detected == 0

    def test_nothing_found(self):
        result = RankedMentionExtractor().run(MentionQuery("No colleges here.", KNOWN))
        assert result.mentions == []
        assert not result.used_fallback

    @pytest.mark.parametrize("text,names", [(None, None), ("", []), ("1.", KNOWN)])
    def test_entry_point_never_raises(self, text, names):
        result = parse_visibility_response(text, names)
        assert result.total_count == 0
