import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from src.casegen.core.config import Settings
from src.casegen.domain.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    api_key: str | None
    model_name: str
    base_url: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        api_key = settings.GEMINI_API_KEY.get_secret_value() if settings.GEMINI_API_KEY else None
        return cls(api_key=api_key, model_name=settings.MODEL_NAME, base_url=settings.LLM_BASE_URL)


class GenerationClient(Protocol):
    async def generate(self, prompt: str) -> str: ...


def _content_to_text(content) -> str:
    if isinstance(content, str):
        return content
    # Multi-part content: keep only the text segments.
    chunks = []
    for part in content or []:
        if isinstance(part, str):
            chunks.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            chunks.append(part.get("text", ""))
    return "".join(chunks)


class GeminiLLMService:
    """
    Sends prompts to Gemini through its OpenAI-compatible endpoint.
    Failures are not retried; they surface as ProviderError.
    """

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config

    @property
    def model_name(self) -> str:
        return self._config.model_name

    def get_model(self, model_name: Optional[str] = None) -> BaseChatModel:
        if not self._config.api_key:
            raise ProviderError("GEMINI_API_KEY is not configured")

        return ChatOpenAI(
            base_url=self._config.base_url,
            api_key=self._config.api_key,
            model=model_name or self._config.model_name,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        llm = self.get_model()
        try:
            response = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error(f"Generation provider call failed: {e}")
            raise ProviderError(str(e) or e.__class__.__name__) from e

        if response is None:
            raise ProviderError("Provider returned no completion")
        return _content_to_text(response.content)
