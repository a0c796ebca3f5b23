from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	ENVIRONMENT: Literal["dev", "prod", "test"] = "dev"
	PROJECT_NAME: str = "AI Test Case Generator"
	LOG_LEVEL: str = "INFO"

	# Gemini exposes an OpenAI-compatible endpoint, so ChatOpenAI can talk to it directly.
	GEMINI_API_KEY: SecretStr | None = None
	LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
	MODEL_NAME: str = "gemini-1.5-flash"

	# Reference file limits (free tier friendly)
	MAX_FILE_SIZE_BYTES: int = 100 * 1024
	FILE_SIZE_WARNING_BYTES: int = 80 * 1024
	MAX_FILE_CONTENT_CHARS: int = 5000

	CORS_ORIGINS: list[str] = ["*"]

	model_config = SettingsConfigDict(
		env_file=".env",
		env_file_encoding="utf-8",
		case_sensitive=True,
		extra="ignore"
	)


@lru_cache
def get_settings() -> Settings:
	return Settings()
