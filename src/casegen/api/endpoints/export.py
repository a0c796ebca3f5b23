from typing import Any

import orjson
from fastapi import APIRouter, Body
from fastapi.responses import Response

from src.casegen.api.models import FilterResponse, TestCasesRequest
from src.casegen.domain.errors import InputError
from src.casegen.services.presentation import (
	count_by_priority,
	csv_filename,
	export_csv,
	export_json,
	filter_by_priority,
)

router = APIRouter()


def _attachment(content: str, media_type: str, filename: str) -> Response:
	return Response(
		content=content,
		media_type=media_type,
		headers={"Content-Disposition": f'attachment; filename="{filename}"'},
	)


@router.post("/filter", response_model=FilterResponse)
async def filter_test_cases(request: TestCasesRequest):
	cases = request.raw_cases()
	return FilterResponse(
		priority=request.priority,
		counts=count_by_priority(cases),
		test_cases=filter_by_priority(cases, request.priority),
	)


@router.post("/export/json")
async def export_result_json(result: dict[str, Any] = Body(...)):
	"""Pretty-printed copy of the result the caller currently holds."""
	try:
		content = export_json(result)
	except orjson.JSONEncodeError as e:
		raise InputError(f"Result cannot be exported as JSON: {e}") from e
	return _attachment(content, "application/json", "test-cases.json")


@router.post("/export/csv")
async def export_result_csv(request: TestCasesRequest):
	cases = filter_by_priority(request.raw_cases(), request.priority)
	return _attachment(export_csv(cases), "text/csv", csv_filename(request.priority))
