"""Public exceptions for the Formlet SDK."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formlet_sdk._internal.dispatch.models import NormalizedError


class FormletError(Exception):
    """Base exception for all Formlet SDK errors."""


class FormletAPIError(FormletError):
    """Error from the Formlet API or the transport in front of it."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        error: "NormalizedError | None" = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error

    @property
    def error_code(self) -> str | None:
        """Machine-readable code of the underlying error, if any."""
        return self.error.error_code if self.error is not None else None


class FormletConfigError(FormletError):
    """Configuration error (missing API key, invalid URL)."""


class FormletValidationError(FormletAPIError):
    """Request data was missing or could not be serialized (DATA.* codes)."""
