"""
Field Normalizer Agent
-----------------------
Turns the extracted comparison JSON into FeatureBattles and reconciles
aliased data-point keys into canonical ones:

  NAAC → naacGrade   (grade token such as "A+" pulled out of verbose text)
  NIRF → nirfRank    (copied verbatim)

Aliases only fill a canonical key that is absent; no key is ever dropped.

Input:  Dict[str, Any] (parsed JSON)
Output: List[FeatureBattle]
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from agents.base import Agent
from agents.cleaning import extract_grade_token
from agents.errors import PayloadError
from models.payloads import ComparisonPayload
from models.schemas import DataPoints, FeatureBattle

logger = logging.getLogger(__name__)


def _grade_from_alias(raw: Any) -> Any:
    if isinstance(raw, str):
        token = extract_grade_token(raw.replace('"', " ").replace("'", " "))
        return token if token else raw
    return raw


# alias key → (canonical key, value transform)
FIELD_ALIASES = {
    "NAAC": ("naacGrade", _grade_from_alias),
    "NIRF": ("nirfRank", lambda raw: raw),
}


def normalize_data_points(data: DataPoints) -> DataPoints:
    """Return a copy of `data` with canonical keys derived from known aliases."""
    normalized: DataPoints = dict(data)
    for alias, (canonical, transform) in FIELD_ALIASES.items():
        if data.get(alias) and not data.get(canonical):
            normalized[canonical] = transform(data[alias])
    return normalized


def normalize_battle(battle: FeatureBattle) -> FeatureBattle:
    return replace(
        battle,
        client_data_points=normalize_data_points(battle.client_data_points),
        competitor_data_points=normalize_data_points(battle.competitor_data_points),
    )


def validate_payload(data: Dict[str, Any]) -> List[FeatureBattle]:
    """Validate the raw payload; missing or mistyped feature fields get defaults."""
    try:
        payload = ComparisonPayload.model_validate(data)
    except ValidationError as e:
        raise PayloadError(f"Invalid JSON structure: missing features array ({e.error_count()} errors)") from e
    return payload.to_battles()


class FieldNormalizer(Agent):
    """Agent 2: parsed JSON → validated, alias-normalized FeatureBattles."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(name="FieldNormalizer", logger=logger)

    def run(self, data: Dict[str, Any]) -> List[FeatureBattle]:
        battles = validate_payload(data)
        normalized = [normalize_battle(b) for b in battles]
        self.logger.debug(f"Normalized {len(normalized)} feature battles")
        return normalized
