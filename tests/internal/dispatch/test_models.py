"""Tests for dispatch Pydantic models."""

import json
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from formlet_sdk._internal.dispatch.models import (
    DATA_REQUIRED,
    DEFAULT_TIMEOUT_MS,
    ClientConfig,
    NormalizedError,
    RequestEnvelope,
    Result,
    required_error,
)
from formlet_sdk.exceptions import FormletAPIError, FormletConfigError, FormletValidationError


class TestClientConfig:
    """Tests for ClientConfig model."""

    def test_defaults(self):
        """Should default to the public formlet.io dispatch endpoint."""
        config = ClientConfig(api_key="key")
        assert config.endpoint == "https://formlet.io/dispatch"
        assert config.timeout_ms == DEFAULT_TIMEOUT_MS
        assert config.debug is False

    def test_endpoint_uses_origin_only(self):
        """Should drop path, query and credentials from base_url."""
        config = ClientConfig(api_key="key", base_url="http://user:pw@localhost:8080/app/?x=1")
        assert config.endpoint == "http://localhost:8080/dispatch"

    def test_dispatch_path_gets_leading_slash(self):
        """Should normalize the dispatch path to start with '/'."""
        config = ClientConfig(api_key="key", dispatch_path="api/dispatch")
        assert config.dispatch_path == "/api/dispatch"
        assert config.endpoint == "https://formlet.io/api/dispatch"

    def test_empty_api_key_rejected(self):
        """Should reject an empty API key."""
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig(api_key="")
        assert "api_key" in str(exc_info.value)

    def test_relative_base_url_rejected(self):
        """Should reject a base URL without scheme and host."""
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig(api_key="key", base_url="formlet.io")
        assert "absolute URL" in str(exc_info.value)

    def test_is_frozen(self):
        """Should not allow mutation after construction."""
        config = ClientConfig(api_key="key")
        with pytest.raises(ValidationError):
            config.api_key = "other"

    def test_create_raises_config_error(self):
        """Should convert validation failures to FormletConfigError."""
        with pytest.raises(FormletConfigError) as exc_info:
            ClientConfig.create(api_key=None)
        assert "api_key" in str(exc_info.value)

    def test_create_ignores_none_values(self):
        """Should fall back to defaults for values left as None."""
        config = ClientConfig.create(api_key="key", base_url=None, timeout_ms=None)
        assert config.base_url == "https://formlet.io"
        assert config.timeout_ms == DEFAULT_TIMEOUT_MS

    def test_from_env(self):
        """Should read every setting from FORMLET_* variables."""
        env = {
            "FORMLET_KEY": "env-key",
            "FORMLET_URL": "http://localhost:3000",
            "FORMLET_DISPATCH": "rpc",
            "FORMLET_TIMEOUT_MS": "2500",
            "FORMLET_DEBUG": "1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = ClientConfig.from_env()
        assert config.api_key == "env-key"
        assert config.endpoint == "http://localhost:3000/rpc"
        assert config.timeout_ms == 2500
        assert config.debug is True

    def test_from_env_overrides_win(self):
        """Should prefer explicit overrides over the environment."""
        with patch.dict(os.environ, {"FORMLET_KEY": "env-key"}, clear=True):
            config = ClientConfig.from_env(api_key="explicit")
        assert config.api_key == "explicit"

    def test_from_env_missing_key(self):
        """Should raise FormletConfigError when FORMLET_KEY is unset."""
        with patch.dict(os.environ, {}, clear=True), pytest.raises(FormletConfigError):
            ClientConfig.from_env()

    def test_from_env_malformed_timeout_raises(self):
        """Should raise ValueError when FORMLET_TIMEOUT_MS is not an integer."""
        env = {"FORMLET_KEY": "key", "FORMLET_TIMEOUT_MS": "soon"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(ValueError):
            ClientConfig.from_env()


class TestRequestEnvelope:
    """Tests for RequestEnvelope model."""

    def test_payload_defaults_to_empty_object(self):
        """Should always carry a payload mapping."""
        envelope = RequestEnvelope(type="entry.find")
        assert json.loads(envelope.to_json()) == {"type": "entry.find", "payload": {}}

    def test_optional_sections_included_when_set(self):
        """Should serialize filter and meta when given."""
        envelope = RequestEnvelope(
            type="entry.update",
            payload={"id": "e1"},
            filter={"status": "open"},
            meta={"limit": 5},
        )
        assert json.loads(envelope.to_json()) == {
            "type": "entry.update",
            "payload": {"id": "e1"},
            "filter": {"status": "open"},
            "meta": {"limit": 5},
        }

    def test_type_must_not_be_empty(self):
        """Should reject an empty action name."""
        with pytest.raises(ValidationError):
            RequestEnvelope(type="")

    def test_circular_payload_not_serializable(self):
        """Should fail to serialize a payload that references itself."""
        payload: dict = {"namespace": "acme"}
        payload["self"] = payload
        with pytest.raises(ValueError):
            RequestEnvelope(type="entry.create", payload=payload).to_json()


class TestNormalizedError:
    """Tests for NormalizedError model."""

    def test_defaults(self):
        """Should default to a GLOBAL error with status 400."""
        error = NormalizedError(error_code="GLOBAL.ERROR", message="boom")
        assert error.http_status == 400
        assert error.namespace_tag == "GLOBAL"
        assert error.field_errors is None
        assert error.source_cause is None

    def test_rejects_unknown_namespace_tag(self):
        """Should only accept GLOBAL or FORMLET tags."""
        with pytest.raises(ValidationError):
            NormalizedError(error_code="X", message="x", namespace_tag="OTHER")

    def test_keeps_source_cause_out_of_dumps(self):
        """Should carry the original exception without serializing it."""
        cause = RuntimeError("socket closed")
        error = NormalizedError(error_code="GLOBAL.ERROR", message="x", source_cause=cause)
        assert error.source_cause is cause
        assert "source_cause" not in error.model_dump()

    def test_to_exception_for_data_errors(self):
        """Should map DATA.* codes to FormletValidationError."""
        exc = required_error("Missing namespace information").to_exception()
        assert isinstance(exc, FormletValidationError)
        assert exc.error_code == DATA_REQUIRED

    def test_to_exception_for_backend_errors(self):
        """Should map other codes to FormletAPIError."""
        error = NormalizedError(error_code="ENTRY.LOCKED", message="Locked", http_status=409)
        exc = error.to_exception()
        assert type(exc) is FormletAPIError
        assert exc.status_code == 409
        assert str(exc) == "Locked"


class TestResult:
    """Tests for Result model."""

    def test_success(self):
        """Should expose the value of a successful call."""
        result = Result.success({"id": "e1"})
        assert result.ok is True
        assert result.error is None
        assert result.unwrap() == {"id": "e1"}

    def test_failure_unwrap_raises(self):
        """Should raise the mapped exception chained from its cause."""
        cause = TimeoutError("slow")
        error = NormalizedError(error_code="GLOBAL.TIMEOUT", message="Request timed out", source_cause=cause)
        result = Result.failure(error)
        assert result.ok is False
        with pytest.raises(FormletAPIError) as exc_info:
            result.unwrap()
        assert exc_info.value.error is error
        assert exc_info.value.__cause__ is cause

    def test_map_success(self):
        """Should transform successful values."""
        result = Result.success({"result": [1, 2]}).map(lambda body: body["result"])
        assert result.value == [1, 2]

    def test_map_failure_passes_through(self):
        """Should not call the mapper for failures."""
        failed = Result.failure(required_error("Missing entry.id"))

        def explode(_):
            raise AssertionError("mapper called")

        assert failed.map(explode) is failed
