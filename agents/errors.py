"""
Exception taxonomy for the parsing agents.

Agents raise these; the public entry points in utils/pipeline.py catch
them (through Agent.execute) and degrade to fallback results.
"""


class ParserError(Exception):
    """Base class for all parsing failures."""


class ExtractionError(ParserError):
    """Raised when no usable JSON object can be extracted from model text."""


class PayloadError(ParserError):
    """Raised when extracted JSON does not have the expected top-level shape."""
