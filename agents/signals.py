"""
Mention Signal Analyzer
------------------------
Reads the text window around one ranked mention and reports what the
model actually said about that college:

  quantitative   figures: placement rate, packages, NIRF rank, recruiter
                 count, fees, intake                            (3 pts each)
  authority      accreditations, recognitions, research, tie-ups (2 pts each)
  narrative      reputation adjectives                          (1 pt each)
  weaknesses     caveats and hedges

  signal_score   = 3·quantitative + 2·authority + narrative
  richness (0-10) = length bands + figures (max 4) + %, money and
                    authority mentions; capped at 2 when the window is
                    only a generic description with no figures

Input:  context text (str)
Output: MentionSignals
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from agents.base import Agent

logger = logging.getLogger(__name__)

MAX_STRENGTHS = 15
MAX_WEAKNESSES = 5
MAX_REASONING_CHARS = 500
MAX_RICHNESS = 10
GENERIC_RICHNESS_CAP = 2
MAX_FIGURE_POINTS = 4

QUANTITATIVE_WEIGHT = 3
AUTHORITY_WEIGHT = 2
NARRATIVE_WEIGHT = 1

WORD_COUNT_BANDS = (15, 30, 60)

_I = re.IGNORECASE

# (pattern, label builder); every match yields one label, duplicates dropped
QUANTITATIVE_PATTERNS: List[Tuple[re.Pattern, Callable[[re.Match], str]]] = [
    (re.compile(r"(?:placements?\s+rate[^.]*?(\d{2,3})%|(\d{2,3})%\s+placement)", _I),
     lambda m: f"Placement Rate: {m.group(1) or m.group(2)}%"),
    (re.compile(r"(?:average|avg|mean)\s+(?:package|ctc|salary)[^.]*?(?:₹|rs\.?|inr)\s*"
                r"(\d+(?:\.\d+)?)\s*(lpa|lakhs?|lakh)", _I),
     lambda m: f"Average Package: ₹{m.group(1)} {m.group(2).upper()}"),
    (re.compile(r"(?:average|avg|mean)\s+(?:package|ctc|salary)[^.]*?(\d+(?:\.\d+)?)\s*(lpa|lakhs?)", _I),
     lambda m: f"Average Package: ₹{m.group(1)} {m.group(2).upper()}"),
    (re.compile(r"(?:highest|top|max|maximum)\s+(?:package|ctc|salary)[^.]*?(?:₹|rs\.?|inr)?\s*"
                r"(\d+(?:\.\d+)?)\s*(lpa|lakhs?|lakh|cr|crore)", _I),
     lambda m: f"Highest Package: ₹{m.group(1)} {m.group(2).upper()}"),
    (re.compile(r"nirf[^.]*?(?:rank|#|ranking)[^.]*?#?(\d{1,4})", _I),
     lambda m: f"NIRF Rank: #{m.group(1)}"),
    (re.compile(r"rank(?:ed|ing)?\s*#?(\d{1,4})[^.]*?nirf", _I),
     lambda m: f"NIRF Rank: #{m.group(1)}"),
    (re.compile(r"(\d{2,4})\+?\s*(?:companies|recruiters|corporates)", _I),
     lambda m: f"{m.group(1)}+ Recruiting Companies"),
    (re.compile(r"(?:fee|fees|tuition)[^.]*?(?:₹|rs\.?|inr)\s*(\d+(?:\.\d+)?)\s*(lpa|lakhs?|lakh|l|k)", _I),
     lambda m: f"Fee: ₹{m.group(1)} {m.group(2).upper()}"),
    (re.compile(r"(?:intake|seats?)[^.]*?(\d{2,5})\s*(?:students?|seats?)?", _I),
     lambda m: f"Student Intake: {m.group(1)}"),
]

NARRATIVE_WORDS: List[Tuple[str, str]] = [
    ("strong", "Strong reputation mentioned"),
    ("excellent", "Excellent quality mentioned"),
    ("leading", "Leading institution mentioned"),
    ("renowned", "Renowned status mentioned"),
    ("well-known", "Well-known reputation mentioned"),
    ("well known", "Well-known reputation mentioned"),
    ("prestigious", "Prestigious status mentioned"),
    ("reputed", "Reputed institution mentioned"),
    ("reputable", "Reputable institution mentioned"),
    ("well-established", "Well-established presence mentioned"),
    ("well established", "Well-established presence mentioned"),
    ("state-of-the-art", "State-of-the-art facilities mentioned"),
    ("modern", "Modern infrastructure mentioned"),
    ("growing reputation", "Growing reputation mentioned"),
    ("emerging", "Emerging institution mentioned"),
    ("good track record", "Good track record mentioned"),
    ("decent", "Decent quality mentioned"),
]

AUTHORITY_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"naac\s+['\"]?[a-z]\+{0,2}['\"]?", _I), "NAAC accredited"),
    (re.compile(r"naac\s+(?:grade|accredit)", _I), "NAAC accredited"),
    (re.compile(r"\bnaac\b", _I), "NAAC mentioned"),
    (re.compile(r"nba\s+accredit", _I), "NBA accredited"),
    (re.compile(r"aicte\s+approv", _I), "AICTE approved"),
    (re.compile(r"ugc\s+recogni", _I), "UGC recognized"),
    (re.compile(r"accredit(?:ed|ation)", _I), "Accreditation mentioned"),
    (re.compile(r"industry\s+(?:connections?|collaborations?|partnerships?|tie-?ups?)", _I),
     "Industry partnerships mentioned"),
    (re.compile(r"\bresearch\b", _I), "Research focus mentioned"),
    (re.compile(r"tie-?ups?\s+with", _I), "Institutional tie-ups mentioned"),
    (re.compile(r"nirf[\s-]+rank", _I), "NIRF ranked"),
    (re.compile(r"autonomous", _I), "Autonomous status mentioned"),
]

WEAKNESS_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\bhowever\b", _I), "Caveat mentioned"),
    (re.compile(r"\blimited\b", _I), "Limitation noted"),
    (re.compile(r"no data", _I), "Data unavailable"),
    (re.compile(r"not available", _I), "Information unavailable"),
    (re.compile(r"worth noting", _I), "Note of caution"),
    (re.compile(r"important to", _I), "Important consideration"),
    (re.compile(r"recommend.*research", _I), "Additional research recommended"),
    (re.compile(r"verify", _I), "Verification suggested"),
    (re.compile(r"check.*official", _I), "Official verification suggested"),
    (re.compile(r"not.*rank", _I), "Not ranked"),
]

GENERIC_PHRASES = (
    "offers btech",
    "offers b.tech",
    "engineering college with",
    "private college",
    "multi-disciplinary",
)

_URL = re.compile(r"https?://[^\s)]+")
_CITATION = re.compile(r"\(([^)]{2,50})\)")
_SENTENCE_END = re.compile(r"[.!?]+")
_SENTENCE_LEAD = re.compile(r"^[\s*\-•#]+")
_PERCENT = re.compile(r"\d+%")
_MONEY = re.compile(r"₹|\brs\.?|\binr\b|\blpa\b|\blakhs?\b", _I)
_AUTHORITY_BODY = re.compile(r"nirf|naac|nba|aicte", _I)


@dataclass(frozen=True)
class MentionSignals:
    quantitative: List[str] = field(default_factory=list)
    authority: List[str] = field(default_factory=list)
    narrative: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    reasoning: str = ""
    signal_score: int = 0
    richness_score: int = 0

    @property
    def strengths(self) -> List[str]:
        return (self.quantitative + self.authority + self.narrative)[:MAX_STRENGTHS]


# ─── Signal families ─────────────────────────────────────────────────────────


def _unique(labels) -> List[str]:
    found: List[str] = []
    for label in labels:
        if label not in found:
            found.append(label)
    return found


def quantitative_signals(text: str) -> List[str]:
    return _unique(
        build(match)
        for pattern, build in QUANTITATIVE_PATTERNS
        for match in pattern.finditer(text)
    )


def narrative_signals(text: str) -> List[str]:
    lower = text.lower()
    return _unique(label for word, label in NARRATIVE_WORDS if word in lower)


def authority_signals(text: str) -> List[str]:
    return _unique(label for pattern, label in AUTHORITY_PATTERNS if pattern.search(text))


def weakness_signals(text: str) -> List[str]:
    return _unique(label for pattern, label in WEAKNESS_PATTERNS if pattern.search(text))


def context_sources(text: str, known_sources: Dict[str, str]) -> List[str]:
    """
    Sources cited around a mention, in order of evidence strength:
    URL hostnames, then parenthetical citations, then inline names.
    """
    found: List[str] = []

    def collect(haystack: str):
        for key, display in known_sources.items():
            if key in haystack and display not in found:
                found.append(display)

    for url in _URL.findall(text):
        collect(urlparse(url).netloc.lower().replace("www.", ""))
    for inner in _CITATION.findall(text):
        inner = inner.strip().lower()
        if "http" not in inner:
            collect(inner)
    collect(text.lower())
    return found


def first_sentence(text: str) -> str:
    sentences = [_SENTENCE_LEAD.sub("", s).strip() for s in _SENTENCE_END.split(text)]
    sentences = [s for s in sentences if len(s) > 20 and not s.isdigit()]
    reasoning = sentences[0] if sentences else text[:200]
    return reasoning[:MAX_REASONING_CHARS]


# ─── Scores ──────────────────────────────────────────────────────────────────


def signal_score(quantitative: List[str], authority: List[str], narrative: List[str]) -> int:
    return (
        len(quantitative) * QUANTITATIVE_WEIGHT
        + len(authority) * AUTHORITY_WEIGHT
        + len(narrative) * NARRATIVE_WEIGHT
    )


def richness_score(text: str, quantitative: List[str]) -> int:
    """How much the model seems to know about the college, 0-10."""
    word_count = len(text.split())
    score = sum(1 for band in WORD_COUNT_BANDS if word_count > band)
    score += min(len(quantitative), MAX_FIGURE_POINTS)

    if _PERCENT.search(text):
        score += 1
    if _MONEY.search(text):
        score += 1
    if _AUTHORITY_BODY.search(text):
        score += 1

    lower = text.lower()
    if not quantitative and any(phrase in lower for phrase in GENERIC_PHRASES):
        score = min(score, GENERIC_RICHNESS_CAP)
    return min(score, MAX_RICHNESS)


def analyze_context(text: str, known_sources: Dict[str, str]) -> MentionSignals:
    text = text or ""
    quantitative = quantitative_signals(text)
    authority = authority_signals(text)
    narrative = narrative_signals(text)
    return MentionSignals(
        quantitative=quantitative,
        authority=authority,
        narrative=narrative,
        weaknesses=weakness_signals(text)[:MAX_WEAKNESSES],
        sources=context_sources(text, known_sources),
        reasoning=first_sentence(text),
        signal_score=signal_score(quantitative, authority, narrative),
        richness_score=richness_score(text, quantitative),
    )


class MentionSignalAnalyzer(Agent):
    """Agent: context window → MentionSignals."""

    def __init__(self, known_sources: Dict[str, str], logger: Optional[logging.Logger] = None):
        super().__init__(name="MentionSignalAnalyzer", logger=logger)
        self.known_sources = dict(known_sources)

    def run(self, text: str) -> MentionSignals:
        signals = analyze_context(text, self.known_sources)
        self.logger.debug(
            f"    📈 signal {signals.signal_score}, richness {signals.richness_score}/10, "
            f"{len(signals.weaknesses)} caveats"
        )
        return signals
