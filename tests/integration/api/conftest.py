"""
Pytest fixtures for API integration tests.

The app runs against a temp-file SQLite database; ``with TestClient(app)``
runs the lifespan, which creates the tables.
"""

import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from authgate.presentation.api.app import create_app
from authgate_config import Settings
from tests.shared.fixtures.api import make_settings


@pytest.fixture
def database_path(tmp_path) -> Path:
    return tmp_path / "authgate.db"


@pytest.fixture
def settings(database_path) -> Settings:
    return make_settings(database_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def count_users(database_path):
    """Count stored users with an email, read straight from the database file."""

    def _count(email: str) -> int:
        with sqlite3.connect(database_path) as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        return row[0]

    return _count
