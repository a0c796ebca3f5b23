import logging
from dataclasses import dataclass, field
from pathlib import PurePath

from src.casegen.core.config import Settings, get_settings
from src.casegen.domain.errors import FileRejectionError
from src.casegen.domain.schemas import ReferenceFile, RejectedFile

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({
    "text/plain",
    "application/json",
    "text/csv",
    "text/xml",
    "application/xml",
    "text/html",
    "text/css",
    "text/javascript",
    "application/javascript",
    "text/typescript",
    "application/typescript",
})

ALLOWED_EXTENSIONS = frozenset({
    ".txt", ".json", ".csv", ".xml", ".html", ".css", ".js", ".ts",
    ".md", ".yml", ".yaml", ".log", ".sql",
})


@dataclass
class ScreeningResult:
    files: list[ReferenceFile] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)
    warning: str | None = None

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


class FileScreeningService:
    """
    Validates reference files before they reach the prompt.
    A rejected file is reported and skipped; the rest of the batch goes on.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    @staticmethod
    def is_allowed_type(name: str, content_type: str | None = None) -> bool:
        if content_type and content_type.split(";")[0].strip().lower() in ALLOWED_CONTENT_TYPES:
            return True
        return PurePath(name.lower()).suffix in ALLOWED_EXTENSIONS

    def check(self, name: str, size: int, content_type: str | None = None) -> None:
        if not self.is_allowed_type(name, content_type):
            raise FileRejectionError(name, f'File "{name}" is not supported. Only text-based files are allowed.')

        limit_kb = self._settings.MAX_FILE_SIZE_BYTES // 1024
        if size > self._settings.MAX_FILE_SIZE_BYTES:
            raise FileRejectionError(name, f'File "{name}" is too large. Please keep files under {limit_kb}KB.')

    def read_upload(self, name: str, data: bytes, content_type: str | None = None) -> ReferenceFile:
        self.check(name, len(data), content_type)
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError:
            raise FileRejectionError(name, f'Failed to read file "{name}".') from None
        return ReferenceFile(name=name, content=content, size=len(data))

    def size_warning(self, total_size: int) -> str | None:
        limit_kb = self._settings.MAX_FILE_SIZE_BYTES // 1024
        if total_size > self._settings.MAX_FILE_SIZE_BYTES:
            return f"Reference files total {total_size / 1024:.1f}KB, over the {limit_kb}KB budget."
        if total_size > self._settings.FILE_SIZE_WARNING_BYTES:
            return f"Approaching {limit_kb}KB limit. Consider removing some files."
        return None

    def screen_uploads(self, uploads: list[tuple[str, bytes, str | None]]) -> ScreeningResult:
        """Screens raw uploads given as (filename, data, content type)."""
        result = ScreeningResult()
        for name, data, content_type in uploads:
            try:
                result.files.append(self.read_upload(name, data, content_type))
            except FileRejectionError as e:
                logger.info(f"Rejected upload: {e.reason}")
                result.rejected.append(RejectedFile(name=e.name, error=e.reason))
        result.warning = self.size_warning(result.total_size)
        return result

    @staticmethod
    def _encoded_size(file: ReferenceFile) -> int:
        # Trust the larger of the declared and the actual size.
        try:
            return max(file.size, len(file.content.encode("utf-8")))
        except UnicodeEncodeError:
            raise FileRejectionError(file.name, f'Failed to read file "{file.name}".') from None

    def screen_reference_files(self, files: list[ReferenceFile]) -> ScreeningResult:
        """Screens files that arrive already decoded inside a generation request."""
        result = ScreeningResult()
        for file in files:
            try:
                size = self._encoded_size(file)
                self.check(file.name, size)
            except FileRejectionError as e:
                logger.info(f"Excluded reference file: {e.reason}")
                result.rejected.append(RejectedFile(name=e.name, error=e.reason))
                continue
            result.files.append(file.model_copy(update={"size": size}))
        result.warning = self.size_warning(result.total_size)
        return result
