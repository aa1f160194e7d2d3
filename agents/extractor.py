"""
Structured Response Extractor
------------------------------
Pulls one JSON object out of arbitrarily-wrapped model text:

  - strips ```json / ``` code fences
  - takes the span from the first "{" to the last "}"
  - parses; on failure, one repair pass (trailing commas, single quotes)

Input:  raw model text (str)
Output: Dict[str, Any]
"""

import json
import re
import logging
from typing import Any, Dict, Optional

from agents.base import Agent
from agents.errors import ExtractionError

logger = logging.getLogger(__name__)


_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def repair_json(candidate: str) -> str:
    """Best-effort fix for the two most common model JSON slips."""
    repaired = _TRAILING_COMMA.sub(r"\1", candidate)
    return repaired.replace("'", '"')


def locate_json_object(text: str, log: Optional[logging.Logger] = None) -> str:
    """Return the substring from the first '{' to the last '}'."""
    log = log or logger
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ExtractionError("No JSON object found in response")
    if start > 0:
        log.warning(f"Stripped {start} chars of non-JSON content before the JSON object")
    return text[start:end + 1]


def extract_json_object(raw_text: str, log: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Extract and parse the JSON object embedded in `raw_text`.

    Raises ExtractionError when there is no object, or when it still does
    not parse after the repair pass.
    """
    log = log or logger
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ExtractionError("Empty response")

    candidate = locate_json_object(strip_code_fences(raw_text), log)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        log.warning("Attempting JSON repair...")
        try:
            parsed = json.loads(repair_json(candidate))
        except json.JSONDecodeError as e:
            raise ExtractionError(f"Failed to parse JSON after repair: {e}") from e

    if not isinstance(parsed, dict):
        raise ExtractionError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


class StructuredResponseExtractor(Agent):
    """Agent 1: raw model text → parsed JSON object."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(name="StructuredResponseExtractor", logger=logger)

    def run(self, raw_text: str) -> Dict[str, Any]:
        data = extract_json_object(raw_text, self.logger)
        self.logger.debug(f"Extracted JSON object with keys: {sorted(data)}")
        return data
