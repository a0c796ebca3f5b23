from dataclasses import dataclass
from typing import Any

DIAGNOSTIC_TITLE = "Generated Test Cases"
DIAGNOSTIC_DESCRIPTION = "AI-generated test cases (parsing failed)"


@dataclass(frozen=True)
class SuiteResult:
	"""A completion that parsed into the expected testSuite shape.

	The suite is passed through exactly as the model produced it; individual
	test case fields are not validated.
	"""

	test_suite: dict[str, Any]

	@property
	def test_cases(self) -> list[Any]:
		return self.test_suite["testCases"]

	def to_payload(self) -> dict[str, Any]:
		return {"testSuite": self.test_suite}


@dataclass(frozen=True)
class DiagnosticResult:
	"""Fallback carrying the cleaned completion text so a human can recover it."""

	raw_response: str
	parse_error: str
	title: str = DIAGNOSTIC_TITLE
	description: str = DIAGNOSTIC_DESCRIPTION

	def to_payload(self) -> dict[str, Any]:
		return {
			"testSuite": {
				"title": self.title,
				"description": self.description,
				"rawResponse": self.raw_response,
				"parseError": self.parse_error,
			}
		}


ResultEnvelope = SuiteResult | DiagnosticResult
