"""Formlet SDK for Python.

This SDK lets back-ends create, read, update, delete, find and audit
form entries stored on formlet.io.

Public API:
    FormletClient - User-facing client
    instance / get_client - Process-wide client cache
    Result, NormalizedError - Outcome of every call
"""

from formlet_sdk._version import __version__
from formlet_sdk.client import FormletClient, get_client, instance
from formlet_sdk.exceptions import (
    FormletAPIError,
    FormletConfigError,
    FormletError,
    FormletValidationError,
)
from formlet_sdk.models import ClientConfig, EntryScope, NormalizedError, Result

__all__ = [
    "__version__",
    "FormletClient",
    "get_client",
    "instance",
    "FormletError",
    "FormletAPIError",
    "FormletConfigError",
    "FormletValidationError",
    "ClientConfig",
    "EntryScope",
    "NormalizedError",
    "Result",
]
