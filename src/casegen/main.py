import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from src.casegen.api.endpoints import export, files, generation
from src.casegen.core.config import get_settings
from src.casegen.domain.errors import InputError, ProviderError
from src.casegen.services.llm_factory import GeminiLLMService, ProviderConfig

VERSION = "1.0.0"

settings = get_settings()

logging.basicConfig(
	level=settings.LOG_LEVEL,
	format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
	handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
	settings = get_settings()
	logger.info(f"Starting {settings.PROJECT_NAME}...")

	app.state.llm_service = GeminiLLMService(ProviderConfig.from_settings(settings))
	if settings.GEMINI_API_KEY is None:
		logger.warning("GEMINI_API_KEY is not set; generation requests will fail.")
	logger.info(f"LLM service ready (model: {settings.MODEL_NAME}).")

	yield

	logger.info("Shutting down...")


app = FastAPI(
	title="AI Test Case Generator API",
	version=VERSION,
	default_response_class=ORJSONResponse,
	lifespan=lifespan,
)

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.CORS_ORIGINS,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


async def input_error_handler(request: Request, exc: InputError) -> ORJSONResponse:
	return ORJSONResponse(status_code=400, content={"error": str(exc)})


async def provider_error_handler(request: Request, exc: ProviderError) -> ORJSONResponse:
	logger.error(f"Error generating test cases: {exc}")
	return ORJSONResponse(
		status_code=500,
		content={"error": "Failed to generate test cases", "details": str(exc) or "Unknown error"},
	)


async def unexpected_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
	logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
	return ORJSONResponse(
		status_code=500,
		content={"error": "Failed to generate test cases", "details": str(exc) or exc.__class__.__name__},
	)


app.add_exception_handler(InputError, input_error_handler)
app.add_exception_handler(ProviderError, provider_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)

app.include_router(generation.router, tags=["Generation"])
app.include_router(files.router, tags=["Files"])
app.include_router(export.router, tags=["Export"])


@app.get("/health", tags=["System"])
async def health_check() -> dict:
	status = {"service": "ai-test-case-generator", "version": VERSION}

	llm_service = getattr(app.state, "llm_service", None)
	if llm_service is None:
		status["llm"] = "not initialized"
	elif get_settings().GEMINI_API_KEY is None:
		status["llm"] = "error: GEMINI_API_KEY is not set"
	else:
		status["llm"] = f"ready ({llm_service.model_name})"

	return status
