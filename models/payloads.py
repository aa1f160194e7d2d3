"""
Pydantic schemas for validating the raw comparison payload a model returns.

The model decides the shape of its answer, so validation here is lenient:
missing or mistyped fields fall back to defaults instead of failing, and
winner/confidence wording is folded into the closed vocabularies.
"""

import json
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schemas import (
    NEUTRAL, UNCLEAR, WINNERS,
    STRONG, MODERATE, WEAK, CONFIDENCE_LEVELS,
    DataPoints, FeatureBattle,
)


# ─── Vocabulary Closure ──────────────────────────────────────────────────────

WINNER_SYNONYMS: Dict[str, str] = {
    "tie": NEUTRAL,
    "tied": NEUTRAL,
    "draw": NEUTRAL,
    "equal": NEUTRAL,
    "even": NEUTRAL,
    "both": NEUTRAL,
    "same": NEUTRAL,
    "none": UNCLEAR,
    "unknown": UNCLEAR,
}

CONFIDENCE_SYNONYMS: Dict[str, str] = {
    "high": STRONG,
    "very high": STRONG,
    "medium": MODERATE,
    "mid": MODERATE,
    "average": MODERATE,
    "low": WEAK,
    "very low": WEAK,
}


def normalize_winner(value: Any) -> str:
    if not isinstance(value, str):
        return UNCLEAR
    key = value.strip().lower()
    if key in WINNERS:
        return key
    return WINNER_SYNONYMS.get(key, UNCLEAR)


def normalize_confidence(value: Any) -> str:
    if not isinstance(value, str):
        return WEAK
    key = value.strip().lower()
    if key in CONFIDENCE_LEVELS:
        return key
    return CONFIDENCE_SYNONYMS.get(key, WEAK)


def _coerce_scalar(value: Any) -> Any:
    # json.loads accepts NaN and Infinity; neither is a data point
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    # nested structures are kept as compact JSON text so the key survives
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def coerce_data_points(value: Any) -> DataPoints:
    if not isinstance(value, dict):
        return {}
    points: DataPoints = {}
    for key, raw in value.items():
        if isinstance(raw, list):
            items = [_coerce_scalar(v) for v in raw]
            points[str(key)] = [v for v in items if v is not None]
        else:
            points[str(key)] = _coerce_scalar(raw)
    return points


# ─── Payload Schemas ─────────────────────────────────────────────────────────

class FeaturePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    feature_name: str = Field("unknown", alias="featureName")
    winner: str = UNCLEAR
    confidence_level: str = Field(WEAK, alias="confidenceLevel")
    client_reasoning: str = Field("", alias="clientReasoning")
    competitor_reasoning: str = Field("", alias="competitorReasoning")
    client_data_points: Dict[str, Any] = Field(default_factory=dict, alias="clientDataPoints")
    competitor_data_points: Dict[str, Any] = Field(default_factory=dict, alias="competitorDataPoints")
    sources: List[str] = Field(default_factory=list)
    data_gap_identified: Optional[str] = Field(None, alias="dataGapIdentified")

    @field_validator("feature_name", mode="before")
    @classmethod
    def _feature_name(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip():
            return v
        return "unknown"

    @field_validator("winner", mode="before")
    @classmethod
    def _winner(cls, v: Any) -> str:
        return normalize_winner(v)

    @field_validator("confidence_level", mode="before")
    @classmethod
    def _confidence(cls, v: Any) -> str:
        return normalize_confidence(v)

    @field_validator("client_reasoning", "competitor_reasoning", mode="before")
    @classmethod
    def _reasoning(cls, v: Any) -> str:
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return ""

    @field_validator("client_data_points", "competitor_data_points", mode="before")
    @classmethod
    def _data_points(cls, v: Any) -> DataPoints:
        return coerce_data_points(v)

    @field_validator("sources", mode="before")
    @classmethod
    def _sources(cls, v: Any) -> List[str]:
        if not isinstance(v, list):
            return []
        return [s if isinstance(s, str) else str(s) for s in v if s is not None]

    @field_validator("data_gap_identified", mode="before")
    @classmethod
    def _gap(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v
        return None

    def to_battle(self) -> FeatureBattle:
        return FeatureBattle(
            feature_name=self.feature_name,
            winner=self.winner,
            confidence_level=self.confidence_level,
            client_reasoning=self.client_reasoning,
            competitor_reasoning=self.competitor_reasoning,
            client_data_points=dict(self.client_data_points),
            competitor_data_points=dict(self.competitor_data_points),
            sources=list(self.sources),
            data_gap_identified=self.data_gap_identified,
        )


class ComparisonPayload(BaseModel):
    """Top-level ``{"features": [...]}`` object of a comparison response."""
    model_config = ConfigDict(extra="ignore")

    features: List[FeaturePayload]

    @field_validator("features", mode="before")
    @classmethod
    def _features(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            raise ValueError("features must be an array")
        # keep positions stable: a non-object entry becomes an "unknown" battle
        return [item if isinstance(item, dict) else {} for item in v]

    def to_battles(self) -> List[FeatureBattle]:
        return [f.to_battle() for f in self.features]
