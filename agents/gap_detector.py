"""
Data Gap Analyzer
------------------
Annotates each feature battle with which structured fields one college
has that the other lacks:

  client missing = competitor keys − client keys
  competitor missing = client keys − competitor keys

Keys count only when their values survive placeholder cleaning. The
computed message replaces whatever gap text the model supplied.

Input:  List[FeatureBattle]
Output: List[FeatureBattle]
"""

import logging
from dataclasses import replace
from typing import List, Optional

from agents.base import Agent
from agents.cleaning import populated_keys
from models.schemas import FeatureBattle

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "no structured data available for either college"


def compute_data_gap(battle: FeatureBattle) -> Optional[str]:
    client_keys = populated_keys(battle.client_data_points)
    competitor_keys = populated_keys(battle.competitor_data_points)

    client_missing = [k for k in competitor_keys if k not in client_keys]
    competitor_missing = [k for k in client_keys if k not in competitor_keys]

    if client_missing and competitor_missing:
        return (
            f"client missing: {', '.join(client_missing)}; "
            f"competitor missing: {', '.join(competitor_missing)}"
        )
    if client_missing:
        return f"client missing: {', '.join(client_missing)}"
    if competitor_missing:
        return f"competitor missing: {', '.join(competitor_missing)}"
    if not client_keys and not competitor_keys:
        return NO_DATA_MESSAGE
    return None


class DataGapAnalyzer(Agent):
    """Agent 4: attach the computed data-gap message to every battle."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(name="DataGapAnalyzer", logger=logger)

    def run(self, battles: List[FeatureBattle]) -> List[FeatureBattle]:
        annotated = [replace(b, data_gap_identified=compute_data_gap(b)) for b in battles]
        gaps = sum(1 for b in annotated if b.data_gap_identified)
        self.logger.debug(f"Data gaps found in {gaps}/{len(annotated)} features")
        return annotated
