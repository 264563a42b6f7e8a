"""User-facing FormletClient.

Example usage:
    from formlet_sdk import FormletClient

    client = FormletClient(api_key="your-api-key")

    # Create an entry
    entry = client.create(
        namespace="acme",
        formlet="contact",
        created_by="user-1",
        email="jane@example.com",
    ).unwrap()

    # Work inside a namespace
    acme = client.namespace("acme", include_request_payload=True)
    page = acme.find(formlet="contact newsletter", meta={"limit": 20}).unwrap()
"""

from collections.abc import Mapping
from typing import Any

from formlet_sdk._internal.dispatch.client import DispatchClient
from formlet_sdk._internal.dispatch.models import ClientConfig, Result, required_error
from formlet_sdk._internal.entries.scope import EntryScope

SYNC_ACTION = "api.sync"
FIELD_FIND_ACTION = "formlet.field.find"
SYNC_TIMEOUT_MS = 40000

DEFAULT_INSTANCE = "default"


class FormletClient:
    """Client for the formlet.io entry API.

    Entry operations (create, read, update, delete, find, history) accept a
    mapping and/or keyword fields and return a Result; call `.unwrap()` to get
    the value or raise a FormletAPIError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        dispatch_path: str | None = None,
        timeout_ms: int | None = None,
        debug: bool | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        """Initialize the client.

        Unset arguments fall back to the FORMLET_* environment variables and
        then to the defaults (https://formlet.io, /dispatch, 10s timeout).

        Args:
            api_key: The formlet.io API key (default: $FORMLET_KEY).
            base_url: Public formlet.io URL; only its origin is used.
            dispatch_path: Path of the dispatch endpoint.
            timeout_ms: Default request timeout in milliseconds.
            debug: Enable debug logging to stderr.
            config: A ready-made ClientConfig; other arguments are ignored.

        Raises:
            FormletConfigError: If no API key is available or a value is invalid.
        """
        if config is None:
            config = ClientConfig.from_env(
                api_key=api_key,
                base_url=base_url,
                dispatch_path=dispatch_path,
                timeout_ms=timeout_ms,
                debug=debug,
            )
        self._dispatcher = DispatchClient(config)
        self._entries = EntryScope(self._dispatcher)

    @classmethod
    def from_env(cls) -> "FormletClient":
        """Create a client configured only from environment variables."""
        return cls()

    @property
    def config(self) -> ClientConfig:
        return self._dispatcher.config

    def __repr__(self) -> str:
        return f"FormletClient(endpoint={self.config.endpoint!r})"

    # =========================================================================
    # Entry Operations
    # =========================================================================

    def create(self, entry: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """Create an entry (requires namespace, formlet, created_by)."""
        return self._entries.create(entry, **kwargs)

    def update(self, entry: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """Update an entry (requires namespace, id, updated_by)."""
        return self._entries.update(entry, **kwargs)

    def read(self, entry: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """Read an entry (requires namespace, id)."""
        return self._entries.read(entry, **kwargs)

    def find(self, query: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """Find entries in a namespace (requires namespace)."""
        return self._entries.find(query, **kwargs)

    def delete(self, entry: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """Delete an entry (requires namespace, id, updated_by or deleted_by)."""
        return self._entries.delete(entry, **kwargs)

    def history(self, entry: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Result:
        """List the revisions of an entry (requires namespace, id)."""
        return self._entries.history(entry, **kwargs)

    # =========================================================================
    # Scoping
    # =========================================================================

    def namespace(self, name: str, include_request_payload: bool = False) -> EntryScope:
        """Return the entry operations bound to a namespace.

        Args:
            name: The namespace every payload will carry.
            include_request_payload: Resolve to {"result", "payload"} so the
                normalized request can be inspected.

        Raises:
            ValueError: If name is not a non-empty string.
        """
        return self._entries.namespace(name, include_request_payload)

    def formlet(
        self,
        name: str,
        namespace: str | None = None,
        include_request_payload: bool = False,
    ) -> EntryScope:
        """Return the entry operations bound to a formlet (and optionally a namespace).

        Raises:
            ValueError: If name is not a non-empty string.
        """
        return self._entries.formlet(name, namespace, include_request_payload)

    # =========================================================================
    # Other Actions
    # =========================================================================

    def sync(self, data: Mapping[str, Any] | None) -> Result:
        """Synchronize namespaces and formlets from their JSON structure.

        Returns:
            Result with the full response body.
        """
        if not data:
            return Result.failure(required_error("Synchronization data is required", SYNC_ACTION))
        return self._dispatcher.dispatch(SYNC_ACTION, data, options={"timeout": SYNC_TIMEOUT_MS})

    def get_fields(
        self,
        namespace: str,
        formlet: str,
        *,
        is_required: bool | None = None,
        type: str | None = None,
        **options: Any,
    ) -> Result:
        """Return the field definitions of a formlet.

        Args:
            namespace: The namespace of the formlet.
            formlet: The formlet name.
            is_required: Only return required fields.
            type: Only return fields of this type.
            **options: Additional lookup options sent as-is.

        Returns:
            Result with the list of fields.
        """
        if not isinstance(namespace, str) or not namespace:
            return Result.failure(
                required_error("Missing namespace information", FIELD_FIND_ACTION)
            )
        if not isinstance(formlet, str) or not formlet:
            return Result.failure(required_error("Missing formlet information", FIELD_FIND_ACTION))

        payload = dict(options)
        if is_required is not None:
            payload["is_required"] = is_required
        if type is not None:
            payload["type"] = type
        payload["namespace"] = namespace
        payload["formlet"] = formlet

        result = self._dispatcher.dispatch(FIELD_FIND_ACTION, payload)
        return result.map(lambda body: body.get("result") if isinstance(body, dict) else None)

    def dispatch(
        self,
        action: str,
        payload: Mapping[str, Any] | None = None,
        filter: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Result:
        """Send a raw action to the dispatch endpoint. See DispatchClient.dispatch."""
        return self._dispatcher.dispatch(action, payload, filter, meta, options)


# =============================================================================
# Client Cache
# =============================================================================

_clients: dict[str, FormletClient] = {}


def instance(
    name: str | ClientConfig | Mapping[str, Any] = DEFAULT_INSTANCE,
    config: ClientConfig | Mapping[str, Any] | None = None,
) -> FormletClient | None:
    """Return the process-wide client cached under name, creating it lazily.

    Args:
        name: Cache key (default: "default"). A ClientConfig or mapping passed
            here is taken as the config of the "default" client.
        config: Configuration used only when no client is cached under name;
            a ClientConfig or a mapping of FormletClient keyword arguments.

    Returns:
        The cached client, or None when none exists and no config is given.
    """
    if isinstance(name, (ClientConfig, Mapping)):
        name, config = DEFAULT_INSTANCE, name
    client = _clients.get(name)
    if client is not None or config is None:
        return client
    if isinstance(config, ClientConfig):
        client = FormletClient(config=config)
    else:
        client = FormletClient(**config)
    return _clients.setdefault(name, client)


def get_client(name: str = DEFAULT_INSTANCE) -> FormletClient:
    """Get a cached client, creating it from environment variables if needed.

    Raises:
        FormletConfigError: If the client must be created and FORMLET_KEY is unset.
    """
    client = _clients.get(name)
    if client is None:
        client = _clients.setdefault(name, FormletClient.from_env())
    return client


def clear_instances() -> None:
    """Drop every cached client."""
    _clients.clear()
