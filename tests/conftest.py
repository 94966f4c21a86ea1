import pytest
from fastapi.testclient import TestClient

from string_analyzer.main import create_app
from string_analyzer.store import StringStore
from string_analyzer.utils import analyze_string


@pytest.fixture
def store():
    return StringStore()


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as test_client:
        yield test_client


@pytest.fixture
def seeded_store(store):
    """Store holding strings of lengths 3, 5 and 7."""
    for value in ("abc", "level", "racecar"):
        store.insert(value, analyze_string(value))
    return store
