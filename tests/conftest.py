"""Shared fixtures: isolate tests from FORMLET_* settings and the client cache."""

import os

import pytest

from formlet_sdk.client import clear_instances


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith("FORMLET_"):
            monkeypatch.delenv(name)
    clear_instances()
    yield
    clear_instances()
