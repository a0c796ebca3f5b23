import pytest

from src.casegen.core.config import Settings
from src.casegen.domain.errors import FileRejectionError
from src.casegen.domain.schemas import ReferenceFile
from src.casegen.services.uploads import FileScreeningService


@pytest.fixture
def service() -> FileScreeningService:
    return FileScreeningService(Settings(_env_file=None))


@pytest.mark.parametrize("name", ["spec.txt", "API.JSON", "schema.sql", "config.yaml", "app.ts"])
def test_allowed_extensions(name: str) -> None:
    assert FileScreeningService.is_allowed_type(name) is True


def test_mime_type_allows_unknown_extension() -> None:
    assert FileScreeningService.is_allowed_type("notes", "text/plain; charset=utf-8") is True
    assert FileScreeningService.is_allowed_type("image.png", "image/png") is False


def test_rejects_unsupported_file(service: FileScreeningService) -> None:
    with pytest.raises(FileRejectionError) as exc_info:
        service.read_upload("photo.png", b"\x89PNG", "image/png")

    assert exc_info.value.name == "photo.png"
    assert "not supported" in exc_info.value.reason


def test_rejects_oversized_file(service: FileScreeningService) -> None:
    with pytest.raises(FileRejectionError) as exc_info:
        service.read_upload("big.log", b"a" * (100 * 1024 + 1), "text/plain")

    assert "too large" in exc_info.value.reason


def test_rejects_undecodable_file(service: FileScreeningService) -> None:
    with pytest.raises(FileRejectionError) as exc_info:
        service.read_upload("data.csv", b"\xff\xfe\xfa", "text/csv")

    assert "Failed to read" in exc_info.value.reason


def test_batch_continues_after_rejection(service: FileScreeningService) -> None:
    """One bad file does not stop the others."""
    result = service.screen_uploads([
        ("a.txt", b"hello", "text/plain"),
        ("b.exe", b"MZ", "application/octet-stream"),
        ("c.md", b"# title", None),
    ])

    assert [f.name for f in result.files] == ["a.txt", "c.md"]
    assert [r.name for r in result.rejected] == ["b.exe"]
    assert result.total_size == 12
    assert result.warning is None


def test_total_size_warning(service: FileScreeningService) -> None:
    result = service.screen_uploads([
        ("a.txt", b"a" * 50 * 1024, "text/plain"),
        ("b.txt", b"b" * 40 * 1024, "text/plain"),
    ])

    assert len(result.files) == 2
    assert "Approaching 100KB limit" in result.warning


def test_screen_reference_files_uses_actual_size(service: FileScreeningService) -> None:
    """A declared size smaller than the content does not bypass the limit."""
    files = [
        ReferenceFile(name="ok.json", content="{}", size=2),
        ReferenceFile(name="lie.txt", content="z" * (101 * 1024), size=10),
        ReferenceFile(name="bad.bin", content="x", size=1),
    ]
    result = service.screen_reference_files(files)

    assert [f.name for f in result.files] == ["ok.json"]
    assert {r.name for r in result.rejected} == {"lie.txt", "bad.bin"}


def test_unencodable_reference_file_is_rejected(service: FileScreeningService) -> None:
    """A lone surrogate in decoded content is a per-file rejection."""
    files = [
        ReferenceFile.model_construct(name="broken.txt", content="\ud800", size=1),
        ReferenceFile(name="ok.txt", content="fine", size=4),
    ]
    result = service.screen_reference_files(files)

    assert [f.name for f in result.files] == ["ok.txt"]
    assert result.rejected[0].name == "broken.txt"
    assert "Failed to read" in result.rejected[0].error
