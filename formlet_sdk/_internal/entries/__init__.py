"""Entry operations for the Formlet SDK.

WARNING: This is a system-level module used by FormletClient.
Use FormletClient.namespace() / FormletClient.formlet() instead.
"""

from formlet_sdk._internal.entries.normalizer import ACTIONS, ALL_FORMLETS
from formlet_sdk._internal.entries.scope import EntryScope

__all__ = [
    "ACTIONS",
    "ALL_FORMLETS",
    "EntryScope",
]
