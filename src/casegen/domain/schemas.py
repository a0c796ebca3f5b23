from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReferenceFile(BaseModel):
	name: str
	content: str
	size: int = 0  # bytes


class TestCase(BaseModel):
	"""Lenient view of a generated test case; every field may be missing."""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	id: Any = None
	title: Any = None
	description: Any = None
	category: Any = None
	priority: Any = None
	preconditions: Any = None
	test_steps: Any = Field(None, alias="testSteps")
	input_data: Any = Field(None, alias="inputData")
	expected_result: Any = Field(None, alias="expectedResult")
	tags: Any = None


class RejectedFile(BaseModel):
	name: str
	error: str
