"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

# web.app builds a module-level app at import time; keep it away from the
# user's real storage file.
os.environ.setdefault(
    "CHESS_STUDY_STORAGE",
    str(Path(tempfile.gettempdir()) / "chess_study_tests" / "storage.json"),
)

from study.config import Settings  # noqa: E402
from study.controller import InteractionController  # noqa: E402
from study.session import StudySession  # noqa: E402
from study.storage import KeyValueStore, Persistence  # noqa: E402


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "storage.json"


@pytest.fixture
def store(storage_path: Path) -> KeyValueStore:
    return KeyValueStore(storage_path)


@pytest.fixture
def persistence(store: KeyValueStore) -> Persistence:
    return Persistence(store)


@pytest.fixture
def session(persistence: Persistence) -> StudySession:
    return StudySession(persistence)


@pytest.fixture
def controller(session: StudySession) -> InteractionController:
    return InteractionController(session)


@pytest.fixture
def client(storage_path: Path):
    """TestClient over an app whose storage lives in the test's tmp dir."""
    from fastapi.testclient import TestClient

    from web.app import create_app

    return TestClient(create_app(Settings(storage_path=storage_path)))
