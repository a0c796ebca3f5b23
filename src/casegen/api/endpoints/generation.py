import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.casegen.api.models import GenerateRequest
from src.casegen.core.config import get_settings
from src.casegen.services.generator import TestCaseGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_generator(request: Request) -> TestCaseGenerator:
	return TestCaseGenerator(request.app.state.llm_service, get_settings())


@router.post("/generate")
async def generate_test_cases(
		body: GenerateRequest,
		generator: Annotated[TestCaseGenerator, Depends(get_generator)],
):
	# InputError and ProviderError are mapped to 400/500 by the app's exception handlers.
	outcome = await generator.generate(body.input, body.test_type, body.uploaded_files)

	response = {"success": True, "data": outcome.result.to_payload()}
	if outcome.warnings:
		response["warnings"] = outcome.warnings
	return response


@router.get("/generate")
async def describe_generate():
	return {
		"message": "AI Test Case Generator API",
		"usage": 'Send POST request with { "input": "your requirement", "testType": "optional type", '
		'"uploadedFiles": [{ "name": "...", "content": "...", "size": 0 }] }',
	}
