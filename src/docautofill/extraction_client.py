"""Document intake and the extraction service client."""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError

from docautofill import logger
from docautofill.exceptions import DocumentValidationError, ExtractionServiceError
from docautofill.settings import build_httpx_client_kwargs
from docautofill.typing.models import AnalysisPayload, ExtractionResult, UploadedFile

if TYPE_CHECKING:
    from types import TracebackType

    from docautofill.settings import Settings

ALLOWED_EXTENSIONS: frozenset[str] = frozenset({"pdf", "jpg", "jpeg"})
ALLOWED_MEDIA_TYPES: frozenset[str] = frozenset({"application/pdf", "image/jpeg", "image/jpg"})
DEFAULT_MAX_DOCUMENT_SIZE_BYTES = 1024 * 1024

_MEDIA_TYPES_BY_EXTENSION = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}
_FALLBACK_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(name: str) -> str:
    """Guess the media type of a document from its file name.

    Args:
        name (str): File name.

    Returns:
        str: Media type, `application/octet-stream` when unknown.
    """
    extension = Path(name).suffix.lower().lstrip(".")
    if extension in _MEDIA_TYPES_BY_EXTENSION:
        return _MEDIA_TYPES_BY_EXTENSION[extension]
    guessed, _ = mimetypes.guess_type(name)
    return guessed or _FALLBACK_MEDIA_TYPE


def validate_document(
    name: str,
    media_type: str,
    size: int,
    *,
    max_size_bytes: int = DEFAULT_MAX_DOCUMENT_SIZE_BYTES,
) -> None:
    """Reject documents the extraction service does not accept.

    Args:
        name (str): File name.
        media_type (str): Declared media type.
        size (int): Size in bytes.
        max_size_bytes (int): Largest accepted size.

    Raises:
        DocumentValidationError: If the extension, media type or size is not accepted.
    """
    extension = Path(name).suffix.lower().lstrip(".")
    if extension not in ALLOWED_EXTENSIONS:
        raise DocumentValidationError(
            message=f"Unsupported file extension '.{extension}'; expected one of: "
            + ", ".join(sorted(ALLOWED_EXTENSIONS)),
        )
    if media_type.lower() not in ALLOWED_MEDIA_TYPES:
        raise DocumentValidationError(message=f"Unsupported media type '{media_type}'")
    if size <= 0:
        raise DocumentValidationError(message=f"Document '{name}' is empty")
    if size > max_size_bytes:
        raise DocumentValidationError(
            message=f"Document '{name}' is {size} bytes; the limit is {max_size_bytes} bytes",
        )


def to_data_url(content: bytes, media_type: str) -> str:
    """Encode document bytes as a `data:` URL content handle."""
    return f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"


class ExtractionServiceClient:
    """Client of the document categorization endpoint."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        """Initialize the client.

        Args:
            settings (Settings): Runtime settings.
            client (httpx.Client | None): Preconfigured HTTP client; one is built from settings when omitted.

        Raises:
            ExtractionServiceError: If no extraction service URL is configured.
        """
        url = settings.extraction_url
        if url is None:
            raise ExtractionServiceError(message="EXTRACTION_SERVICE_URL is not configured")
        self._settings = settings
        self._url = url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(**build_httpx_client_kwargs(settings))

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client when this instance created it."""
        if self._owns_client:
            self._client.close()

    def analyze(self, path: Path, *, auto_fill: bool = True) -> ExtractionResult:
        """Send a document to the extraction service.

        Args:
            path (Path): Document to analyze.
            auto_fill (bool): Auto-fill intent recorded on the result.

        Raises:
            DocumentValidationError: If the document is rejected before upload.
            ExtractionServiceError: If the service call fails or answers unusably.

        Returns:
            ExtractionResult: Store-ready result.
        """
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise DocumentValidationError(message=f"Cannot read document {path}: {exc}") from exc

        media_type = guess_media_type(path.name)
        validate_document(
            path.name,
            media_type,
            len(content),
            max_size_bytes=self._settings.max_document_size_bytes,
        )

        logger.info(
            "Calling extraction service",
            extra={"url": self._url, "file_name": path.name, "size": len(content)},
        )
        analysis = self._post(path.name, media_type, content)
        result = ExtractionResult.from_analysis(
            analysis,
            file=UploadedFile(data_url=to_data_url(content, media_type), name=path.name, media_type=media_type),
            auto_fill=auto_fill,
        )
        logger.info(
            "Extraction service answered",
            extra={
                "category": result.category,
                "sub_category": result.sub_category,
                "fields": len(result.data_fields),
            },
        )
        return result

    def _post(self, name: str, media_type: str, content: bytes) -> AnalysisPayload:
        try:
            response = self._client.post(self._url, files={"file": (name, content, media_type)})
        except httpx.HTTPError as exc:
            raise ExtractionServiceError(message=f"Extraction service unreachable: {exc}") from exc

        if response.is_error:
            raise ExtractionServiceError(
                message=f"Extraction service rejected the document: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            analysis = AnalysisPayload.model_validate_json(response.content)
        except ValidationError as exc:
            raise ExtractionServiceError(
                message=f"Extraction service returned an invalid body: {exc.error_count()} error(s)",
                status_code=response.status_code,
            ) from exc

        if not analysis.success:
            raise ExtractionServiceError(
                message="Extraction service could not analyze the document",
                status_code=response.status_code,
            )
        return analysis
