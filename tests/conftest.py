"""Shared fixtures: a stub agent standing in for the chat model."""

import pytest
from fastapi.testclient import TestClient

from fms_interpreter.config import Settings
from fms_interpreter.main import create_app


class StubAgent:
    def __init__(self, raw="{}", error=None):
        self.raw = raw
        self.error = error
        self.calls = []

    async def interpret(self, report):
        self.calls.append(report)
        if self.error is not None:
            raise self.error
        return self.raw


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("FMS_LLM_PROVIDER", raising=False)
    monkeypatch.delenv("FMS_LLM_MODEL", raising=False)
    return Settings()


@pytest.fixture
def stub_agent():
    return StubAgent()


@pytest.fixture
def client(stub_agent, settings):
    return TestClient(create_app(agent=stub_agent, settings=settings))
