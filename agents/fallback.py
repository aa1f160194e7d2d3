"""
Fallback Text Analyzer
-----------------------
Last-resort verdict when no structured JSON can be recovered: counts how
often each college is named in the raw text.

  client wins      if  client_mentions > competitor_mentions
                   and client_mentions ≥ ratio · competitor_mentions
  (symmetric for the competitor; otherwise unclear)

Input:  raw model text (str)
Output: ComparisonAnalysis with no features
"""

import logging
from typing import Optional

from agents.base import Agent
from config.settings import settings
from models.schemas import CLIENT, COMPETITOR, UNCLEAR, ComparisonAnalysis

logger = logging.getLogger(__name__)


def count_mentions(text: str, name: str) -> int:
    """Case-insensitive, non-overlapping literal occurrences of `name`."""
    if not text or not name:
        return 0
    return text.lower().count(name.lower())


def mention_winner(client_mentions: int, competitor_mentions: int, ratio: float) -> str:
    if client_mentions > competitor_mentions and client_mentions >= ratio * competitor_mentions:
        return CLIENT
    if competitor_mentions > client_mentions and competitor_mentions >= ratio * client_mentions:
        return COMPETITOR
    return UNCLEAR


class FallbackTextAnalyzer(Agent):
    """Heuristic winner from name-mention counts. `run` never raises."""

    def __init__(
        self,
        client_name: str,
        competitor_name: str,
        ratio: float = settings.MENTION_RATIO_THRESHOLD,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="FallbackTextAnalyzer", logger=logger)
        self.client_name = client_name or ""
        self.competitor_name = competitor_name or ""
        self.ratio = ratio

    def run(self, raw_text: str) -> ComparisonAnalysis:
        self.logger.warning("⚠️ Using fallback text parsing — JSON extraction failed")
        text = raw_text if isinstance(raw_text, str) else ""

        client_mentions = count_mentions(text, self.client_name)
        competitor_mentions = count_mentions(text, self.competitor_name)
        winner = mention_winner(client_mentions, competitor_mentions, self.ratio)

        return ComparisonAnalysis(
            features=[],
            overall_winner=winner,
            summary=(
                "Fallback parsing used. Could not extract structured JSON from AI response. "
                f"{self.client_name} mentioned {client_mentions} times, "
                f"{self.competitor_name} mentioned {competitor_mentions} times."
            ),
            used_fallback=True,
        )
