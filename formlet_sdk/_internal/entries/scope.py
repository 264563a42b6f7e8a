"""Entry operations and the namespace/formlet scoping views built on them."""

from collections.abc import Mapping
from typing import Any

from formlet_sdk._internal.dispatch.client import DispatchClient
from formlet_sdk._internal.dispatch.models import Result
from formlet_sdk._internal.entries.normalizer import (
    ACTIONS,
    apply_scope,
    check_required,
    merge_fields,
    scope_formlet,
)

# Operations that resolve to {"result", "meta"} rather than the bare result
LISTING_OPERATIONS = frozenset({"find", "history"})


class EntryScope:
    """The six entry operations, optionally bound to a namespace and/or formlet.

    A scope borrows the dispatch client of the FormletClient that created it
    and never mutates it. Binding again returns a new, narrower scope:

        contacts = client.namespace("acme").formlet("contact")
        contacts.create({"created_by": "u1", "email": "a@b.co"})

    Every operation takes an optional mapping plus keyword fields (keywords
    win), with `filter` and `meta` sent alongside the payload in the envelope.
    All of them return a Result and never raise for request failures.
    """

    def __init__(
        self,
        dispatcher: DispatchClient,
        *,
        namespace: str | None = None,
        formlet: str | None = None,
        include_request_payload: bool = False,
    ) -> None:
        self._dispatcher = dispatcher
        self._namespace = namespace
        self._formlet = formlet
        self._include_request_payload = include_request_payload

    def __repr__(self) -> str:
        return (
            f"EntryScope(namespace={self._namespace!r}, formlet={self._formlet!r}, "
            f"include_request_payload={self._include_request_payload!r})"
        )

    @property
    def bound_namespace(self) -> str | None:
        return self._namespace

    @property
    def bound_formlet(self) -> str | None:
        return self._formlet

    @property
    def include_request_payload(self) -> bool:
        return self._include_request_payload

    # =========================================================================
    # Scoping
    # =========================================================================

    def namespace(self, name: str, include_request_payload: bool | None = None) -> "EntryScope":
        """Return a view of the entry operations bound to a namespace.

        Raises:
            ValueError: If name is not a non-empty string.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("namespace() requires a non-empty string")
        return self._rebind(namespace=name, formlet=self._formlet, include=include_request_payload)

    def formlet(
        self,
        name: str,
        namespace: str | None = None,
        include_request_payload: bool | None = None,
    ) -> "EntryScope":
        """Return a view bound to a formlet, nested under any bound formlet.

        Raises:
            ValueError: If name is not a non-empty string.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("formlet() requires a non-empty string")
        return self._rebind(
            namespace=namespace or self._namespace,
            formlet=scope_formlet(self._formlet, name),
            include=include_request_payload,
        )

    def _rebind(
        self, *, namespace: str | None, formlet: str | None, include: bool | None
    ) -> "EntryScope":
        return EntryScope(
            self._dispatcher,
            namespace=namespace,
            formlet=formlet,
            include_request_payload=(
                self._include_request_payload if include is None else include
            ),
        )

    # =========================================================================
    # Entry Operations
    # =========================================================================

    def create(
        self,
        entry: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Create a new entry.

        Args:
            entry: Entry data; must end up with namespace, formlet and created_by.
            filter: Optional querying filters.
            meta: Optional request metadata.
            **fields: Entry fields laid over `entry`.

        Returns:
            Result with the created entry.
        """
        return self._run("create", entry, fields, filter, meta)

    def update(
        self,
        entry: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Update an existing entry if its formlet allows it.

        Requires namespace, id and updated_by; `filter` narrows which entry
        is updated.
        """
        return self._run("update", entry, fields, filter, meta)

    def read(
        self,
        entry: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Read a single entry by namespace and id."""
        return self._run("read", entry, fields, filter, meta)

    def find(
        self,
        query: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Find entries in a namespace, optionally restricted to formlets.

        A space-separated `formlet` string selects several formlets; without
        one every formlet in the namespace is searched. Pagination fields
        (page, limit, start_date, end_date, date_field, order, order_by) go
        in the query itself.

        Returns:
            Result with {"result": [...], "meta": {...}}.
        """
        return self._run("find", query, fields, filter, meta)

    def delete(
        self,
        entry: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Delete an entry; `deleted_by` is accepted in place of `updated_by`."""
        return self._run("delete", entry, fields, filter, meta)

    def history(
        self,
        entry: Mapping[str, Any] | None = None,
        /,
        *,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Result:
        """Return every recorded revision of a single entry."""
        return self._run("history", entry, fields, filter, meta)

    def _run(
        self,
        operation: str,
        entry: Mapping[str, Any] | None,
        fields: Mapping[str, Any],
        filter: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None,
    ) -> Result:
        payload = apply_scope(
            operation,
            merge_fields(entry, fields),
            namespace=self._namespace,
            formlet=self._formlet,
        )
        error = check_required(operation, payload)
        if error is not None:
            return Result.failure(error)

        result = self._dispatcher.dispatch(ACTIONS[operation], payload, filter, meta)
        return result.map(lambda body: self._shape(operation, body, payload))

    def _shape(self, operation: str, body: Any, payload: dict[str, Any]) -> Any:
        """Reduce a response body to what the operation resolves to."""
        body = body if isinstance(body, dict) else {}
        result = body.get("result")
        if operation == "delete" and not result:
            result = {}

        if operation in LISTING_OPERATIONS:
            shaped: dict[str, Any] = {"result": result, "meta": body.get("meta")}
        elif self._include_request_payload:
            shaped = {"result": result}
        else:
            return result

        if self._include_request_payload:
            shaped["payload"] = payload
        return shaped
