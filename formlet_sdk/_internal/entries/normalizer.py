"""Payload shaping for entry operations.

Turns a caller's mapping plus keyword fields into the canonical payload the
dispatch endpoint expects, applies namespace/formlet scoping, and checks the
fields each action requires before anything goes over the wire.
"""

from collections.abc import Callable, Mapping
from typing import Any

from formlet_sdk._internal.dispatch.models import NormalizedError, required_error

# =============================================================================
# Constants
# =============================================================================

ALL_FORMLETS = "_all"
FORMLET_SEPARATOR = "."

ACTIONS: dict[str, str] = {
    "create": "entry.create",
    "update": "entry.update",
    "read": "entry.read",
    "find": "entry.find",
    "delete": "entry.delete",
    "history": "entry.history",
}


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_present(value: Any) -> bool:
    return value is not None


# (field, check, message) in the order they are reported
Requirement = tuple[str, Callable[[Any], bool], str]

_NAMESPACE: Requirement = ("namespace", _is_text, "Missing namespace information")
_ENTRY_ID: Requirement = ("id", _is_text, "Missing entry.id")

REQUIREMENTS: dict[str, tuple[Requirement, ...]] = {
    "create": (
        _NAMESPACE,
        ("formlet", _is_text, "Missing formlet information"),
        ("created_by", _is_text, "Missing created by information"),
    ),
    "update": (
        _NAMESPACE,
        _ENTRY_ID,
        ("updated_by", _is_present, "Missing updated by information"),
    ),
    "read": (_NAMESPACE, _ENTRY_ID),
    "find": (_NAMESPACE,),
    "delete": (
        _NAMESPACE,
        _ENTRY_ID,
        ("updated_by", _is_present, "Missing deleted by information"),
    ),
    "history": (_NAMESPACE, _ENTRY_ID),
}

# =============================================================================
# Shaping
# =============================================================================


def merge_fields(entry: Mapping[str, Any] | None, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Copy the caller's mapping and lay keyword fields over it.

    The caller's mapping is never mutated; explicit keywords win.
    """
    payload = dict(entry) if entry is not None else {}
    payload.update(fields)
    return payload


def scope_formlet(bound: str | None, value: Any) -> Any:
    """Qualify a formlet name with the formlet a scope is bound to.

    Examples:
        scope_formlet("forms.contact", "sub") -> "forms.contact.sub"
        scope_formlet("forms.contact", "forms.contact.sub") -> "forms.contact.sub"
        scope_formlet("forms.contact", None) -> "forms.contact"
    """
    if not bound:
        return value
    if not isinstance(value, str) or not value:
        return bound
    if value.startswith(bound):
        return value
    return f"{bound}{FORMLET_SEPARATOR}{value}"


def find_formlets(value: Any, bound: str | None = None) -> str | list[str]:
    """Resolve the formlet selector sent with entry.find.

    A string is split on whitespace into an ordered list of names; anything
    else selects every formlet (or the bound formlet inside a formlet scope).
    """
    if isinstance(value, str) and value.split():
        return [scope_formlet(bound, name) for name in value.split()]
    return bound or ALL_FORMLETS


def apply_scope(
    operation: str,
    payload: dict[str, Any],
    namespace: str | None = None,
    formlet: str | None = None,
) -> dict[str, Any]:
    """Apply scope bindings and per-operation rewrites in place."""
    if namespace is not None:
        payload["namespace"] = namespace

    if operation == "find":
        payload["formlet"] = find_formlets(payload.get("formlet"), formlet)
    elif formlet is not None:
        payload["formlet"] = scope_formlet(formlet, payload.get("formlet"))

    if operation == "delete" and isinstance(payload.get("deleted_by"), str):
        payload["updated_by"] = payload["deleted_by"]
    return payload


def check_required(operation: str, payload: Mapping[str, Any]) -> NormalizedError | None:
    """Return a DATA.REQUIRED error for the first missing field, if any."""
    for field, check, message in REQUIREMENTS[operation]:
        if not check(payload.get(field)):
            return required_error(message, ACTIONS[operation])
    return None
