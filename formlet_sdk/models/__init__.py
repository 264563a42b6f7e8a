"""Public models for the Formlet SDK.

    from formlet_sdk.models import Result

    result = client.read(namespace="acme", id="entry-1")
    if not result.ok and result.error.error_code == "FIELD.INVALID":
        print(result.error.field_errors)
"""

from formlet_sdk._internal.dispatch.models import (
    DATA_INVALID,
    DATA_REQUIRED,
    FIELD_INVALID,
    GLOBAL_ERROR,
    GLOBAL_RESPONSE,
    GLOBAL_TIMEOUT,
    ClientConfig,
    NormalizedError,
    Result,
)
from formlet_sdk._internal.entries.scope import EntryScope

__all__ = [
    "ClientConfig",
    "EntryScope",
    "NormalizedError",
    "Result",
    "DATA_REQUIRED",
    "DATA_INVALID",
    "FIELD_INVALID",
    "GLOBAL_RESPONSE",
    "GLOBAL_TIMEOUT",
    "GLOBAL_ERROR",
]
