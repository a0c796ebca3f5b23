import logging
from dataclasses import dataclass, field
from typing import Any

from src.casegen.core.config import Settings, get_settings
from src.casegen.domain.errors import InputError
from src.casegen.domain.models import ResultEnvelope, SuiteResult
from src.casegen.domain.schemas import ReferenceFile
from src.casegen.services.llm_factory import GenerationClient
from src.casegen.services.normalizer import normalize_completion
from src.casegen.services.prompts import build_prompt
from src.casegen.services.uploads import FileScreeningService

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    result: ResultEnvelope
    warnings: list[str] = field(default_factory=list)


class TestCaseGenerator:
    """
    Runs one generation request end to end:
    input check -> file screening -> prompt -> provider call -> normalization.
    """

    __test__ = False

    def __init__(self, client: GenerationClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._screening = FileScreeningService(self._settings)

    async def generate(
        self,
        requirement: Any,
        test_type: str | None = None,
        files: list[ReferenceFile] | None = None,
    ) -> GenerationOutcome:
        requirement = requirement.strip() if isinstance(requirement, str) else ""
        if not requirement:
            raise InputError("Input is required")

        warnings: list[str] = []
        screened = self._screening.screen_reference_files(files or [])
        warnings.extend(r.error for r in screened.rejected)
        if screened.warning:
            logger.warning(screened.warning)
            warnings.append(screened.warning)

        prompt = build_prompt(
            requirement,
            (test_type or "").strip() or None,
            screened.files,
            max_file_chars=self._settings.MAX_FILE_CONTENT_CHARS,
        )
        logger.info(f"Generating test cases ({len(screened.files)} reference files, {len(prompt)} prompt chars)")

        completion = await self._client.generate(prompt)
        result = normalize_completion(completion)

        if isinstance(result, SuiteResult):
            logger.info(f"✅ Parsed {len(result.test_cases)} test cases")
        else:
            logger.warning(f"Returning raw completion: {result.parse_error}")

        return GenerationOutcome(result=result, warnings=warnings)
