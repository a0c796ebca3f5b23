from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.casegen.domain.enums import PriorityFilter
from src.casegen.domain.schemas import ReferenceFile, RejectedFile, TestCase


class GenerateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	# Any JSON value is accepted here; anything but a non-empty string is an InputError.
	input: Any = None
	test_type: Optional[str] = Field(None, alias="testType")
	uploaded_files: Optional[list[ReferenceFile]] = Field(None, alias="uploadedFiles")


class UploadResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	files: list[ReferenceFile] = []
	rejected: list[RejectedFile] = []
	total_size: int = Field(0, alias="totalSize")
	warning: Optional[str] = None


class TestCasesRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	test_cases: list[TestCase] = Field(default_factory=list, alias="testCases")
	priority: PriorityFilter = PriorityFilter.ALL

	@field_validator("priority", mode="before")
	@classmethod
	def lower_priority(cls, value: Any) -> Any:
		return value.lower() if isinstance(value, str) else value

	def raw_cases(self) -> list[dict[str, Any]]:
		return [case.model_dump(by_alias=True, exclude_unset=True) for case in self.test_cases]


class FilterResponse(BaseModel):
	priority: PriorityFilter
	counts: dict[str, int]
	test_cases: list[dict[str, Any]] = Field(serialization_alias="testCases")
