"""Pydantic models for Formlet dispatch requests and outcomes.

These models match the wire contract of the formlet.io dispatch endpoint.
"""

import os
from collections.abc import Callable
from typing import Any, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, ValidationError, field_validator

from formlet_sdk.exceptions import (
    FormletAPIError,
    FormletConfigError,
    FormletValidationError,
)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_BASE_URL = "https://formlet.io"
DEFAULT_DISPATCH_PATH = "/dispatch"
DEFAULT_TIMEOUT_MS = 10000

# Error codes produced by the SDK itself
DATA_REQUIRED = "DATA.REQUIRED"
DATA_INVALID = "DATA.INVALID"
FIELD_INVALID = "FIELD.INVALID"
GLOBAL_RESPONSE = "GLOBAL.RESPONSE"
GLOBAL_TIMEOUT = "GLOBAL.TIMEOUT"
GLOBAL_ERROR = "GLOBAL.ERROR"

NamespaceTag = Literal["GLOBAL", "FORMLET"]

# =============================================================================
# Configuration
# =============================================================================


class ClientConfig(BaseModel):
    """Static client configuration, set once at construction.

    Required fields:
        api_key: The formlet.io API key (non-empty)

    Optional fields:
        base_url: Public formlet.io URL; only its origin is used
        dispatch_path: Path of the dispatch endpoint (default: "/dispatch")
        timeout_ms: Default request timeout in milliseconds
        debug: Enable debug logging to stderr
    """

    api_key: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    dispatch_path: str = DEFAULT_DISPATCH_PATH
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    debug: bool = False

    model_config = {"frozen": True}

    @field_validator("base_url")
    @classmethod
    def base_url_absolute(cls, v: str) -> str:
        parsed = urlsplit(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("base_url must be an absolute URL")
        return v

    @field_validator("dispatch_path")
    @classmethod
    def dispatch_path_rooted(cls, v: str) -> str:
        if not v.startswith("/"):
            return "/" + v
        return v

    @property
    def endpoint(self) -> str:
        """Origin of base_url joined with the dispatch path."""
        parsed = urlsplit(self.base_url)
        host = parsed.netloc.rpartition("@")[2]
        return f"{parsed.scheme}://{host}{self.dispatch_path}"

    @classmethod
    def create(cls, **values: Any) -> "ClientConfig":
        """Build a config, dropping unset values and raising FormletConfigError.

        Raises:
            FormletConfigError: If a value is missing or invalid.
        """
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise FormletConfigError(f"Invalid Formlet configuration: {fields}") from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Create a config from environment variables.

        Required environment variables:
            FORMLET_KEY: The API key.

        Optional environment variables:
            FORMLET_URL: The public formlet.io URL.
            FORMLET_DISPATCH: The dispatch path.
            FORMLET_TIMEOUT_MS: Request timeout in milliseconds.
            FORMLET_DEBUG: Set to "1" to enable debug logging.

        Keyword overrides that are not None take precedence over the environment.

        Raises:
            FormletConfigError: If the key is missing or a value is invalid.
            ValueError: If FORMLET_TIMEOUT_MS is not a valid integer.
        """
        timeout = os.environ.get("FORMLET_TIMEOUT_MS")
        values: dict[str, Any] = {
            "api_key": os.environ.get("FORMLET_KEY"),
            "base_url": os.environ.get("FORMLET_URL"),
            "dispatch_path": os.environ.get("FORMLET_DISPATCH"),
            "timeout_ms": int(timeout) if timeout is not None else None,
            "debug": os.environ.get("FORMLET_DEBUG", "") == "1",
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)


# =============================================================================
# Request Envelope
# =============================================================================


class RequestEnvelope(BaseModel):
    """Outer JSON object POSTed to the dispatch endpoint.

    Required fields:
        type: The server-side action name (e.g., 'entry.create')

    Optional fields:
        payload: Action payload, always sent (defaults to an empty object)
        filter: Additional querying filters
        meta: Request metadata (pagination and the like)
    """

    type: str = Field(min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    filter: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None

    def to_json(self) -> str:
        """Serialize for the wire, omitting unset optional sections."""
        return self.model_dump_json(exclude_none=True)


# =============================================================================
# Outcomes
# =============================================================================


class NormalizedError(BaseModel):
    """A classified transport, backend or validation failure.

    Created once where the raw failure is classified and never mutated.
    """

    error_code: str
    message: str
    http_status: int = 400
    namespace_tag: NamespaceTag = "GLOBAL"
    field_errors: dict[str, Any] | None = None
    causing_action: str | None = None
    source_cause: BaseException | None = Field(default=None, exclude=True, repr=False)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def to_exception(self) -> FormletAPIError:
        """Build the exception raised by Result.unwrap() for this error."""
        exc_type = (
            FormletValidationError if self.error_code.startswith("DATA.") else FormletAPIError
        )
        return exc_type(self.message, self.http_status, error=self)


def required_error(message: str, action: str | None = None) -> NormalizedError:
    """Error for a caller that omitted a mandatory field."""
    return NormalizedError(error_code=DATA_REQUIRED, message=message, causing_action=action)


class Result(BaseModel):
    """Outcome of a single call: a value on success, a NormalizedError otherwise."""

    value: Any = None
    error: NormalizedError | None = None

    model_config = {"frozen": True}

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: NormalizedError) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def map(self, fn: Callable[[Any], Any]) -> "Result":
        """Apply fn to a successful value; failures pass through unchanged."""
        if self.error is not None:
            return self
        return Result.success(fn(self.value))

    def unwrap(self) -> Any:
        """Return the value, or raise the error as a FormletAPIError.

        Raises:
            FormletValidationError: For DATA.* errors.
            FormletAPIError: For every other error.
        """
        if self.error is not None:
            raise self.error.to_exception() from self.error.source_cause
        return self.value
