import json
import logging
import re
from typing import Any

import orjson

from src.casegen.domain.models import DiagnosticResult, ResultEnvelope, SuiteResult

logger = logging.getLogger(__name__)

# Models sometimes emit fences mid-text, so every token is removed, not just the outer pair.
_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
# Greedy on purpose: first "{" to last "}".
_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")

INVALID_STRUCTURE = "Invalid response structure"
EMPTY_RESPONSE = "Empty response from model"


class _StructureError(ValueError):
    pass


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON.
    raise ValueError(f"Invalid JSON constant: {token}")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def clean_completion(text: str) -> str:
    """
    Strips markdown fences and surrounding prose from a model completion.
    Returns the working text the parser will see.
    """
    text = (text or "").strip()
    text = _FENCE_RE.sub("", text)
    text = text.strip()

    if not text.startswith("{"):
        match = _OBJECT_SPAN_RE.search(text)
        if match:
            text = match.group(0)

    return text


def _parse(text: str) -> Any:
    try:
        return _loads(text)
    except json.JSONDecodeError as first_error:
        # Naive salvage: braces inside string literals can fool it.
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise

        logger.info("First parse failed, retrying on the outermost braces...")
        try:
            return _loads(text[start:end + 1])
        except json.JSONDecodeError:
            raise first_error from None


def is_test_suite_payload(parsed: Any) -> bool:
    """The single predicate deciding between a suite and a diagnostic."""
    if not isinstance(parsed, dict):
        return False
    suite = parsed.get("testSuite")
    return isinstance(suite, dict) and isinstance(suite.get("testCases"), list)


def normalize_completion(text: str) -> ResultEnvelope:
    """
    Converts an untrusted completion into a ResultEnvelope.
    Never raises: every parse or shape problem becomes a DiagnosticResult.
    """
    cleaned = clean_completion(text)
    logger.debug(f"Cleaned text for parsing: {cleaned[:200]}...")

    if not cleaned:
        logger.warning("Completion was empty after cleaning")
        return DiagnosticResult(raw_response=cleaned, parse_error=EMPTY_RESPONSE)

    try:
        parsed = _parse(cleaned)
        if not is_test_suite_payload(parsed):
            raise _StructureError(INVALID_STRUCTURE)
        # Values such as integers wider than 64 bits cannot be rendered in the response.
        orjson.dumps(parsed)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning(f"JSON parsing failed: {e}")
        return DiagnosticResult(raw_response=cleaned, parse_error=str(e) or INVALID_STRUCTURE)

    return SuiteResult(test_suite=parsed["testSuite"])
