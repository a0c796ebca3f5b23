from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from src.casegen.api.models import UploadResponse
from src.casegen.core.config import get_settings
from src.casegen.services.uploads import FileScreeningService

router = APIRouter()


@router.post("/files", response_model=UploadResponse)
async def upload_reference_files(files: Annotated[list[UploadFile], File(...)]):
	"""
	Screens uploaded reference files and returns their text content.
	Unsupported or oversized files are listed under `rejected` without failing the batch.
	"""
	uploads = []
	for file in files:
		data = await file.read()
		uploads.append((file.filename or "unnamed", data, file.content_type))

	result = FileScreeningService(get_settings()).screen_uploads(uploads)

	return UploadResponse(
		files=result.files,
		rejected=result.rejected,
		total_size=result.total_size,
		warning=result.warning,
	)
