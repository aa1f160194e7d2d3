"""
Configuration & Settings
College Comparison & AI Visibility Parser
"""

from pydantic import BaseModel
from typing import Dict


class Settings(BaseModel):
    # App
    APP_NAME: str = "College Comparison & AI Visibility Parser"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    LOG_DATEFMT: str = "%H:%M:%S"

    # Inter-attribute aggregation weights (per-attribute sub-signal weights
    # live next to their scoring strategies in agents/scorer.py)
    FEATURE_WEIGHTS: Dict[str, float] = {
        "placements": 30.0,
        "fees": 20.0,
        "accreditation": 15.0,
        "faculty": 15.0,
        "infrastructure": 10.0,
        "industry_exposure": 5.0,
        "location": 5.0,
    }
    DEFAULT_FEATURE_WEIGHT: float = 10.0

    CONFIDENCE_MULTIPLIERS: Dict[str, float] = {
        "strong": 1.0,
        "moderate": 0.6,
        "weak": 0.3,
    }
    DEFAULT_CONFIDENCE_MULTIPLIER: float = 0.3

    # |client - competitor| below this margin is a neutral overall outcome
    NEUTRAL_MARGIN: float = 5.0

    # Fallback text analysis: mention count ratio needed to declare a winner
    MENTION_RATIO_THRESHOLD: float = 1.5

    # Ranked mention extraction
    CONTEXT_MAX_CHARS: int = 300
    CONTEXT_FOLLOWING_LINES: int = 2
    MIN_MATCH_LENGTH: int = 3
    MIN_TOKEN_LENGTH: int = 4
    MIN_TOKEN_OVERLAP: int = 2


settings = Settings()
