"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class StorageError(PackageError):
    """Raised when a durable session store cannot be written."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class StorageQuotaError(StorageError):
    """Raised when a write would exceed the durable store quota."""

    limit_bytes: int = 0

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} (quota: {self.limit_bytes} bytes)"


@dataclass(frozen=True)
class DocumentValidationError(PackageError):
    """Raised when an uploaded document is rejected before extraction."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ExtractionServiceError(PackageError):
    """Raised when the extraction service call fails."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"
