"""Dispatch system for the Formlet SDK.

WARNING: This is a system-level module used by FormletClient.
Do not call directly from user code.
"""

from formlet_sdk._internal.dispatch.client import DispatchClient
from formlet_sdk._internal.dispatch.models import (
    ClientConfig,
    NormalizedError,
    RequestEnvelope,
    Result,
)

__all__ = [
    "DispatchClient",
    "ClientConfig",
    "NormalizedError",
    "RequestEnvelope",
    "Result",
]
