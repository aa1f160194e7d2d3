"""
Text Entity Matcher
--------------------
Resolves a free-text name fragment to one canonical name from a known
list. Tiers are tried in order; the first tier with a hit wins, and
within a tier the known list order decides:

  1. exact          case-insensitive, whitespace collapsed
  2. contains       the candidate contains a known name
  3. contained      a known name contains the candidate
  4. token overlap  ≥ N shared long words (mutual substring containment)

Candidates shorter than MIN_MATCH_LENGTH never match.
"""

import re
import logging
from typing import List, Optional, Sequence

from agents.base import Agent
from config.settings import settings

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"[a-z0-9]+")


def normalize_name(name: str) -> str:
    return _WHITESPACE.sub(" ", (name or "").lower()).strip()


def significant_tokens(name: str, min_length: int = settings.MIN_TOKEN_LENGTH) -> List[str]:
    return [w for w in _WORD.findall(normalize_name(name)) if len(w) >= min_length]


def shared_token_count(candidate_tokens: Sequence[str], known_tokens: Sequence[str]) -> int:
    return sum(
        1 for word in candidate_tokens
        if any(word in other or other in word for other in known_tokens)
    )


class TextEntityMatcher(Agent):
    """Fuzzy name resolution against a fixed list of canonical names."""

    def __init__(
        self,
        known_names: Sequence[str],
        min_match_length: int = settings.MIN_MATCH_LENGTH,
        min_token_length: int = settings.MIN_TOKEN_LENGTH,
        min_token_overlap: int = settings.MIN_TOKEN_OVERLAP,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="TextEntityMatcher", logger=logger)
        self.known_names = [n for n in known_names if isinstance(n, str) and n.strip()]
        self.min_match_length = min_match_length
        self.min_token_length = min_token_length
        self.min_token_overlap = min_token_overlap
        self._normalized = [(n, normalize_name(n)) for n in self.known_names]

    def run(self, candidate: str) -> Optional[str]:
        return self.match(candidate)

    def match(self, candidate: str) -> Optional[str]:
        target = normalize_name(candidate)
        if len(target) < self.min_match_length:
            return None

        for known, norm in self._normalized:
            if norm == target:
                return known

        for known, norm in self._normalized:
            if norm in target:
                return known

        for known, norm in self._normalized:
            if target in norm:
                return known

        candidate_tokens = significant_tokens(target, self.min_token_length)
        if len(candidate_tokens) < self.min_token_overlap:
            return None
        for known, norm in self._normalized:
            known_tokens = significant_tokens(norm, self.min_token_length)
            if shared_token_count(candidate_tokens, known_tokens) >= self.min_token_overlap:
                return known

        return None
