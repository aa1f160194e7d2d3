"""
Ranked Mention Extractor
-------------------------
Parses a numbered free-text answer ("Top colleges for B.Tech in Delhi")
into ranked mentions of known colleges.

  1. Split into non-empty lines; track section headers
     (markdown "#", bold-only lines, ALL-CAPS lines)
  2. List entries: "<n>." or "<n>)" + optional bold + name segment
     ending at ":", ";", "|", "," or a spaced dash
  3. Clean the name, resolve it with TextEntityMatcher
  4. Context = entry line + following lines, markdown-stripped, bounded
  5. Signals (figures, authority, narrative, caveats, sources) are read
     from the whole window; see agents/signals.py
  6. Keep the first rank per canonical name

When no list entry resolves, every known name is searched for in the
whole text and ranked by first occurrence.

Input:  MentionQuery(text, known_names)
Output: VisibilityResult
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from agents.base import Agent
from agents.matcher import TextEntityMatcher
from agents.signals import MentionSignalAnalyzer
from config.settings import settings
from models.schemas import RankedMention, VisibilityResult

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "General"
UNKNOWN_TIER = "unknown"

# Checked in order; the first keyword found in the header decides
SECTION_TIERS: List[Tuple[str, Tuple[str, ...]]] = [
    ("best_overall", (
        "best overall", "top overall", "top-tier", "top tier", "well-known",
        "well known", "ranked", "premier", "best engineering",
        "top engineering", "top colleges", "best colleges",
    )),
    ("strong_private", (
        "strong private", "good private", "good placements", "good roi",
        "decent", "notable private", "popular", "reputed private",
    )),
    ("universities_with_engineering", (
        "universities with", "university", "multi-disciplinary",
        "multi disciplinary", "engineering programs", "engineering programme",
    )),
    ("other_options", (
        "other", "notable option", "additional", "emerging", "budget",
        "affordable option", "worth considering", "honorable mention",
    )),
]

KNOWN_SOURCES: Dict[str, str] = {
    "shiksha": "Shiksha",
    "collegedunia": "CollegeDunia",
    "careers360": "Careers360",
    "nirf": "NIRF",
    "naac": "NAAC",
    "gn group": "GN Group",
    "getmyuni": "GetMyUni",
    "india today": "India Today",
    "outlook": "Outlook",
    "the week": "The Week",
    "nba": "NBA",
    "aicte": "AICTE",
    "ugc": "UGC",
}

RANKING_FACTORS = (
    "placement", "package", "infrastructure", "faculty", "fees", "campus",
    "hostel", "research", "accreditation", "ranking", "scholarship",
    "internship", "industry",
)

_ENTRY_LINE = re.compile(r"^(\d+)[.)]\s*(.+)$")
_BOLD_LEAD = re.compile(r"^\*\*(.+?)\*\*")
_NAME_TERMINATOR = re.compile(r"[:;|,]|\s+[-–—]")
_PARENTHETICAL = re.compile(r"\([^)]*\)")
_NAME_CUT = re.compile(r"[-–—:]")
_EMPHASIS = re.compile(r"[*_`]+")
_BRACKETS = re.compile(r"[\[\]]")
_WHITESPACE = re.compile(r"\s+")

_MARKDOWN_HEADER = re.compile(r"^#{1,6}\s+")
_BOLD_ONLY = re.compile(r"^\*\*[^*]+\*\*:?$")
_ALL_CAPS = re.compile(r"^[A-Z][A-Z\s&()/-]{7,}$")
_LIST_MARKER = re.compile(r"^(?:\d+[.)]|[-*•])\s+")


@dataclass(frozen=True)
class MentionQuery:
    text: str
    known_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ListEntry:
    rank: int
    raw_name: str
    line_index: int


# ─── Text helpers ────────────────────────────────────────────────────────────


def clean_entity_name(segment: str) -> str:
    """'**XYZ Institute of Tech** (Rank #3)' → 'XYZ Institute of Tech'."""
    name = _EMPHASIS.sub("", segment)
    name = _PARENTHETICAL.sub(" ", name)
    name = _BRACKETS.sub("", name).split("(", 1)[0]
    name = _NAME_CUT.split(name, 1)[0]
    return _WHITESPACE.sub(" ", name).strip()


def strip_markdown(text: str) -> str:
    text = _MARKDOWN_HEADER.sub("", text)
    text = _EMPHASIS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def parse_list_entry(line: str, line_index: int) -> Optional[ListEntry]:
    match = _ENTRY_LINE.match(line)
    if not match:
        return None
    rank = int(match.group(1))
    remainder = match.group(2).strip()

    bold = _BOLD_LEAD.match(remainder)
    segment = bold.group(1) if bold else remainder
    segment = _PARENTHETICAL.sub(" ", segment)
    segment = _NAME_TERMINATOR.split(segment, 1)[0]

    name = clean_entity_name(segment)
    if rank <= 0 or not name:
        return None
    return ListEntry(rank=rank, raw_name=name, line_index=line_index)


def section_header(line: str) -> Optional[str]:
    """Header text when `line` is a section header, else None."""
    if _ENTRY_LINE.match(line):
        return None
    if _MARKDOWN_HEADER.match(line) or _BOLD_ONLY.match(line):
        return strip_markdown(line).rstrip(":").strip() or None
    if len(line) < 60 and _ALL_CAPS.match(line):
        return line.strip()
    return None


def classify_section(header: str) -> str:
    lower = header.lower()
    for tier, keywords in SECTION_TIERS:
        if any(keyword in lower for keyword in keywords):
            return tier
    return UNKNOWN_TIER


def find_sources(text: str) -> List[str]:
    lower = text.lower()
    return [display for key, display in KNOWN_SOURCES.items() if key in lower]


def find_ranking_factors(text: str) -> List[str]:
    lower = text.lower()
    return [factor for factor in RANKING_FACTORS if factor in lower]


# ─── RankedMentionExtractor ──────────────────────────────────────────────────


class RankedMentionExtractor(Agent):
    """Agent: numbered free text + known names → VisibilityResult."""

    def __init__(
        self,
        context_max_chars: int = settings.CONTEXT_MAX_CHARS,
        following_lines: int = settings.CONTEXT_FOLLOWING_LINES,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="RankedMentionExtractor", logger=logger)
        self.context_max_chars = context_max_chars
        self.following_lines = following_lines
        self.signals = MentionSignalAnalyzer(KNOWN_SOURCES, logger=logger)

    def window_text(self, lines: Sequence[str], index: int) -> str:
        window = " ".join(
            _LIST_MARKER.sub("", line) for line in lines[index:index + 1 + self.following_lines]
        )
        return strip_markdown(window)

    def build_mention(
        self,
        name: str,
        rank: int,
        lines: Sequence[str],
        index: int,
        section: Tuple[str, str],
    ) -> RankedMention:
        window = self.window_text(lines, index)
        signals = self.signals.run(window)
        return RankedMention(
            name=name,
            rank=rank,
            context=window[:self.context_max_chars],
            section=section[0],
            section_tier=section[1],
            reasoning=signals.reasoning,
            strengths=signals.strengths,
            weaknesses=signals.weaknesses,
            sources_cited=signals.sources,
            signal_score=signals.signal_score,
            response_richness_score=signals.richness_score,
        )

    def run(self, query: MentionQuery) -> VisibilityResult:
        text = query.text if isinstance(query.text, str) else ""
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        matcher = TextEntityMatcher(query.known_names, logger=self.logger)

        sections = self._sections_by_line(lines)
        entries = [parse_list_entry(line, i) for i, line in enumerate(lines)]
        entries = [e for e in entries if e is not None]
        self.logger.debug(f"📦 Detected {len(entries)} list entries in {len(lines)} lines")

        mentions: List[RankedMention] = []
        seen = set()
        for entry in entries:
            canonical = matcher.match(entry.raw_name)
            if canonical is None:
                self.logger.debug(f"  ⬜ UNMATCHED: \"{entry.raw_name}\" (#{entry.rank})")
                continue
            if canonical in seen:
                continue
            seen.add(canonical)
            mentions.append(self.build_mention(
                canonical, entry.rank, lines, entry.line_index, sections[entry.line_index],
            ))
            self.logger.debug(f"  ✅ MATCHED: \"{entry.raw_name}\" → \"{canonical}\" (#{entry.rank})")

        used_fallback = False
        if not mentions:
            mentions = self._whole_text_mentions(lines, matcher.known_names, sections)
            used_fallback = bool(mentions)
            if used_fallback:
                self.logger.info(f"🔎 No list entries resolved; found {len(mentions)} names in free text")

        self.logger.info(f"✅ {len(mentions)} ranked mentions ({len(entries)} entries detected)")
        return VisibilityResult(
            mentions=mentions,
            entries_detected=len(entries),
            sources_cited=find_sources(text),
            ranking_factors=find_ranking_factors(text),
            used_fallback=used_fallback,
        )

    def _sections_by_line(self, lines: Sequence[str]) -> List[Tuple[str, str]]:
        current = (DEFAULT_SECTION, UNKNOWN_TIER)
        by_line = []
        for line in lines:
            header = section_header(line)
            if header:
                current = (header, classify_section(header))
                self.logger.debug(f"  📂 Section: \"{header}\" → {current[1]}")
            by_line.append(current)
        return by_line

    def _whole_text_mentions(
        self,
        lines: Sequence[str],
        known_names: Sequence[str],
        sections: Sequence[Tuple[str, str]],
    ) -> List[RankedMention]:
        lowered = [line.lower() for line in lines]
        found = []
        seen = set()
        for order, name in enumerate(known_names):
            needle = name.lower().strip()
            if len(needle) < settings.MIN_MATCH_LENGTH or needle in seen:
                continue
            seen.add(needle)
            for i, line in enumerate(lowered):
                column = line.find(needle)
                if column != -1:
                    found.append((i, column, order, name))
                    break

        return [
            self.build_mention(name, rank, lines, i, sections[i])
            for rank, (i, _, _, name) in enumerate(sorted(found), 1)
        ]
