"""Request dispatcher for the formlet.io dispatch endpoint."""

import sys
from collections.abc import Mapping
from typing import Any

import httpx

from formlet_sdk._internal.dispatch.models import (
    DATA_INVALID,
    FIELD_INVALID,
    GLOBAL_ERROR,
    GLOBAL_RESPONSE,
    GLOBAL_TIMEOUT,
    ClientConfig,
    NormalizedError,
    RequestEnvelope,
    Result,
)
from formlet_sdk._internal.dispatch.redaction import redact_headers, redact_payload
from formlet_sdk._internal.http import create_http_client, default_headers

DEFAULT_ERROR_MESSAGE = "Could not contact formlet servers"
DEFAULT_ERROR_STATUS = 400
FIELD_ERROR_MESSAGE = "One or more fields are invalid"

OPTION_KEYS = frozenset({"method", "timeout", "headers"})


class DispatchClient:
    """Sends one JSON envelope per call and normalizes the outcome.

    Every failure is returned as a Result carrying a NormalizedError; nothing
    is raised and nothing is retried. The client keeps no state besides its
    immutable configuration, so concurrent calls are independent.
    """

    def __init__(self, config: ClientConfig) -> None:
        """Initialize the dispatch client.

        Args:
            config: Validated client configuration.
        """
        self._config = config

    @classmethod
    def from_env(cls, **overrides: Any) -> "DispatchClient":
        """Create a dispatch client from FORMLET_* environment variables.

        Raises:
            FormletConfigError: If FORMLET_KEY is missing or a value is invalid.
        """
        return cls(ClientConfig.from_env(**overrides))

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._config.debug:
            print(f"[formlet-sdk] {message}", file=sys.stderr)

    def _build_options(
        self, options: Mapping[str, Any] | None
    ) -> tuple[str, httpx.Headers, float]:
        """Resolve method, headers and timeout (ms) for one request.

        Caller headers are merged over the defaults; other keys replace them.
        """
        method = "POST"
        headers = httpx.Headers(default_headers(self._config.api_key))
        timeout_ms: float = self._config.timeout_ms
        if options:
            unknown = set(options) - OPTION_KEYS
            if unknown:
                self._log_debug(f"Ignoring unsupported options: {sorted(unknown)}")
            if isinstance(options.get("headers"), Mapping):
                headers.update(options["headers"])
            if options.get("method"):
                method = str(options["method"]).upper()
            if options.get("timeout") is not None:
                timeout_ms = float(options["timeout"])
        return method, headers, timeout_ms

    def dispatch(
        self,
        action: str,
        payload: Mapping[str, Any] | None = None,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Result:
        """Send an envelope to the dispatch endpoint.

        This is the core dispatch method. All entry operations call this.

        Args:
            action: Server-side action name (e.g., 'entry.create').
            payload: Action payload; None is sent as an empty object.
            filter: Optional querying filters.
            meta: Optional request metadata.
            options: Optional overrides for 'method', 'timeout' (ms) and 'headers'.

        Returns:
            Result with the response body (minus its 'type' key) on success,
            or a NormalizedError describing the failure.
        """
        if not isinstance(action, str) or not action:
            return Result.failure(
                NormalizedError(error_code=DATA_INVALID, message="A dispatch action is required")
            )

        try:
            method, headers, timeout_ms = self._build_options(options)
        except (TypeError, ValueError) as e:
            self._log_debug(f"Invalid options for {action}: {e}")
            return Result.failure(
                NormalizedError(
                    error_code=DATA_INVALID,
                    message="The request options are not valid",
                    causing_action=action,
                    source_cause=e,
                )
            )

        try:
            envelope = RequestEnvelope(
                type=action,
                payload=payload if payload is not None else {},
                filter=filter,
                meta=meta,
            )
            body = envelope.to_json()
        except ValueError as e:
            self._log_debug(f"Could not serialize {action} envelope: {e}")
            return Result.failure(
                NormalizedError(
                    error_code=DATA_INVALID,
                    message="The requested payload is not valid",
                    causing_action=action,
                    source_cause=e,
                )
            )

        self._log_debug(
            f"{method} {self._config.endpoint} {action} "
            f"payload={redact_payload(envelope.payload)} headers={redact_headers(headers)}"
        )
        return self._send(action, method, headers, body, timeout_ms)

    def _send(
        self,
        action: str,
        method: str,
        headers: httpx.Headers,
        body: str,
        timeout_ms: float,
    ) -> Result:
        """Perform the request and classify whatever comes back."""
        status_code: int | None = None
        try:
            with create_http_client(timeout=timeout_ms / 1000) as client:
                response = client.request(
                    method,
                    self._config.endpoint,
                    content=body.encode("utf-8"),
                    headers=headers,
                )
            status_code = response.status_code
            data = response.json()
        except httpx.TimeoutException as e:
            self._log_debug(f"{action} timed out after {timeout_ms:.0f}ms")
            return Result.failure(
                self._reclassify(action, e, GLOBAL_TIMEOUT, "Request timed out")
            )
        except httpx.HTTPError as e:
            self._log_debug(f"{action} transport error: {e}")
            return Result.failure(
                self._reclassify(
                    action,
                    e,
                    GLOBAL_ERROR,
                    "Could not contact the server",
                    status_code or DEFAULT_ERROR_STATUS,
                )
            )
        except ValueError as e:
            self._log_debug(f"{action} returned a non-JSON body (status {status_code})")
            return Result.failure(
                self._reclassify(
                    action, e, GLOBAL_RESPONSE, "Request data could not be processed."
                )
            )

        if 200 <= status_code <= 299:
            if isinstance(data, dict):
                data.pop("type", None)
            self._log_debug(f"{action} succeeded with status {status_code}")
            return Result.success(data)

        error = self._error_from_body(action, status_code, data)
        self._log_debug(f"{action} failed with status {status_code}: {error.error_code}")
        return Result.failure(error)

    def _error_from_body(self, action: str, status_code: int, data: Any) -> NormalizedError:
        """Map a non-2xx response body to a FORMLET-tagged error."""
        body = data if isinstance(data, dict) else {}
        nested = body.get("error") if isinstance(body.get("error"), dict) else {}

        if body.get("code") == FIELD_INVALID:
            fields, message = body.get("error"), body.get("message")
        elif nested.get("code") == FIELD_INVALID:
            fields, message = nested.get("error"), nested.get("message")
        else:
            return NormalizedError(
                error_code=_text_or(nested.get("code"), GLOBAL_ERROR),
                message=_text_or(nested.get("message"), DEFAULT_ERROR_MESSAGE),
                http_status=_as_status(nested.get("status")),
                namespace_tag="FORMLET",
                causing_action=action,
            )

        return NormalizedError(
            error_code=FIELD_INVALID,
            message=_text_or(message, FIELD_ERROR_MESSAGE),
            http_status=status_code,
            namespace_tag="FORMLET",
            field_errors=fields if isinstance(fields, dict) else None,
            causing_action=action,
        )

    @staticmethod
    def _reclassify(
        action: str,
        cause: Exception,
        code: str,
        message: str,
        status: int = DEFAULT_ERROR_STATUS,
    ) -> NormalizedError:
        return NormalizedError(
            error_code=code,
            message=message,
            http_status=status,
            namespace_tag="GLOBAL",
            causing_action=action,
            source_cause=cause,
        )


def _text_or(value: Any, default: str) -> str:
    """Use a backend-supplied string only when it is a non-empty str."""
    return value if isinstance(value, str) and value else default


def _as_status(value: Any) -> int:
    """Coerce a backend-supplied status to int, defaulting to 400."""
    if isinstance(value, bool):
        return DEFAULT_ERROR_STATUS
    try:
        return int(value) if value else DEFAULT_ERROR_STATUS
    except (TypeError, ValueError):
        return DEFAULT_ERROR_STATUS

