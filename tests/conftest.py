"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.core.agent import ChatOrchestrator
from app.core.profiles import parse_profiles
from app.core.sessions import SessionStore
from app.main import create_app
from tests.helpers import PROFILES, StubLLM


@pytest.fixture
def profiles():
    return parse_profiles(PROFILES)


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def llm():
    return StubLLM()


@pytest.fixture
def orchestrator(profiles, sessions, llm):
    return ChatOrchestrator(profiles=profiles, sessions=sessions, llm=llm, timeout_seconds=5.0)


@pytest.fixture
def client(orchestrator):
    with TestClient(create_app(orchestrator)) as c:
        yield c
