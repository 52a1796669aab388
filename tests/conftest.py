"""
Shared fixtures for the mood journal tests.

Every store writes under pytest's tmp_path; importing main must not touch
a real data directory, so the default store file is redirected first.
"""
import os
import tempfile

os.environ.setdefault("MOOD_STORE_FILE", os.path.join(tempfile.mkdtemp(), "moods.json"))

import pytest
from fastapi.testclient import TestClient

from database import MoodJSONStore
from schemas import MoodEntry, MoodType


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "moods.json"


@pytest.fixture
def store(store_path):
    return MoodJSONStore(store_path)


@pytest.fixture
def make_entry():
    def _make(mood_type=MoodType.NEUTRAL, note="", timestamp="2025-10-19 12:00:00", **kwargs):
        return MoodEntry(mood_type=mood_type, note=note, timestamp=timestamp, **kwargs)
    return _make


@pytest.fixture
def client(store):
    from main import create_app
    return TestClient(create_app(store))
