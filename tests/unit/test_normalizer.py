import json

import pytest

from src.casegen.domain.models import DiagnosticResult, SuiteResult
from src.casegen.services.normalizer import (
    EMPTY_RESPONSE,
    INVALID_STRUCTURE,
    clean_completion,
    is_test_suite_payload,
    normalize_completion,
)

SUITE = {
    "testSuite": {
        "title": "Login",
        "description": "Login form checks",
        "testCases": [
            {"id": "TC001", "title": "Valid login", "priority": "high", "tags": ["auth"]},
            {"id": "TC002", "title": "Wrong password", "priority": "medium"},
        ],
    }
}


@pytest.fixture
def suite_json() -> str:
    return json.dumps(SUITE)


def test_plain_json_parses(suite_json: str) -> None:
    """A well-behaved completion becomes a SuiteResult unchanged."""
    result = normalize_completion(suite_json)

    assert isinstance(result, SuiteResult)
    assert result.test_suite == SUITE["testSuite"]
    assert len(result.test_cases) == 2


def test_fenced_json_parses() -> None:
    """Markdown fences with a json tag are stripped."""
    text = '```json\n{"testSuite":{"title":"t","description":"d","testCases":[]}}\n```'
    result = normalize_completion(text)

    assert isinstance(result, SuiteResult)
    assert result.test_suite["title"] == "t"
    assert result.test_cases == []


def test_fence_tokens_removed_mid_text(suite_json: str) -> None:
    """Fences in the middle of the text are removed too."""
    text = f"```JSON\n{suite_json[:14]}\n```\n{suite_json[14:]}\n```"
    cleaned = clean_completion(text)

    assert "```" not in cleaned
    assert isinstance(normalize_completion(text), SuiteResult)


def test_leading_prose_is_skipped(suite_json: str) -> None:
    """Prose before the object is cut off by the greedy brace match."""
    text = f"Sure, here it is:\n{suite_json}\nHope this helps!"
    result = normalize_completion(text)

    assert isinstance(result, SuiteResult)
    assert result.test_suite["title"] == "Login"


def test_trailing_text_is_salvaged(suite_json: str) -> None:
    """Text after the closing brace is handled by the salvage parse."""
    result = normalize_completion(suite_json + "\n\nLet me know if you need more.")

    assert isinstance(result, SuiteResult)


def test_clean_completion_is_idempotent(suite_json: str) -> None:
    """Normalizing the cleaned text yields the same suite."""
    text = f"Here:\n```json\n{suite_json}\n```"
    cleaned = clean_completion(text)

    assert clean_completion(cleaned) == cleaned
    assert normalize_completion(cleaned) == normalize_completion(text)


def test_trailing_comma_returns_diagnostic() -> None:
    """Invalid JSON falls back to the raw text with a parser message."""
    text = '{"testSuite":{"title":"t","testCases":[1,]}}'
    result = normalize_completion("  " + text + "\n")

    assert isinstance(result, DiagnosticResult)
    assert result.raw_response == text
    assert result.parse_error
    assert result.title == "Generated Test Cases"


def test_valid_json_with_wrong_shape_returns_diagnostic() -> None:
    """Parsing success alone is not enough."""
    result = normalize_completion('{"foo": 1}')

    assert isinstance(result, DiagnosticResult)
    assert result.parse_error == INVALID_STRUCTURE
    assert result.raw_response == '{"foo": 1}'


@pytest.mark.parametrize(
    "payload",
    [
        {"testSuite": {"title": "t"}},
        {"testSuite": {"testCases": None}},
        {"testSuite": "not an object"},
        [{"testSuite": {"testCases": []}}],
    ],
)
def test_structure_predicate_rejects(payload) -> None:
    assert is_test_suite_payload(payload) is False


def test_no_braces_returns_diagnostic() -> None:
    """Plain prose has nothing to salvage."""
    result = normalize_completion("I cannot help with that request.")

    assert isinstance(result, DiagnosticResult)
    assert result.raw_response == "I cannot help with that request."
    assert "Expecting value" in result.parse_error


def test_empty_after_fence_stripping() -> None:
    result = normalize_completion("```json\n```")

    assert isinstance(result, DiagnosticResult)
    assert result.raw_response == ""
    assert result.parse_error == EMPTY_RESPONSE


def test_salvage_failure_reports_first_error() -> None:
    """When both attempts fail the message comes from the direct parse."""
    text = '{"testSuite": {"testCases": [}} trailing }'
    result = normalize_completion(text)

    with pytest.raises(json.JSONDecodeError) as exc_info:
        json.loads(text)

    assert isinstance(result, DiagnosticResult)
    assert result.parse_error == str(exc_info.value)


def test_diagnostic_payload_shape() -> None:
    payload = normalize_completion("nope").to_payload()

    assert set(payload["testSuite"]) == {"title", "description", "rawResponse", "parseError"}
    assert payload["testSuite"]["description"] == "AI-generated test cases (parsing failed)"


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_constants_return_diagnostic(constant: str) -> None:
    """NaN and Infinity are not JSON and must not pass as a suite."""
    text = f'{{"testSuite":{{"testCases":[{{"inputData":{constant}}}]}}}}'
    result = normalize_completion(text)

    assert isinstance(result, DiagnosticResult)
    assert result.raw_response == text
    assert constant.lstrip("-") in result.parse_error


def test_unserializable_integer_returns_diagnostic() -> None:
    """An integer wider than 64 bits cannot be rendered, so the raw text is kept."""
    text = '{"testSuite":{"title":"t","description":"d","testCases":[{"id":"TC1","inputData":18446744073709551616}]}}'
    result = normalize_completion(text)

    assert isinstance(result, DiagnosticResult)
    assert result.raw_response == text
    assert result.parse_error
