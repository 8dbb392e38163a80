"""Pytest configuration for tests."""

import os

# Settings are read at import time; pin them before importing chatbridge.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENWEBUI_API_KEY"] = ""
os.environ["OPENWEBUI_COLLECTION_ID"] = ""
os.environ["APP_ENV"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest

from chatbridge.core.config import get_settings
from chatbridge.database.connection import DatabaseConnection
from chatbridge.database.init_db import init_user_tables
from chatbridge.llm.client import ClientConfig


@pytest.fixture
def settings_cache():
    """Clear cached settings before and after a test that edits the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db(tmp_path):
    """A file-backed SQLite database with the Users table created."""
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'users.db'}")
    init_user_tables(connection)
    yield connection
    connection.close()


@pytest.fixture
def client_config():
    return ClientConfig(
        base_url="http://webui.test",
        api_key="sk-test",
        model="llama3.1:latest",
        default_collection_id="default-collection",
    )


@pytest.fixture
def openwebui_response():
    """A chat completion as returned by OpenWebUI with a knowledge collection attached."""
    return {
        "id": "chatcmpl-1",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "  Week 3 covers sorting.  "},
                "finish_reason": "stop",
            }
        ],
        "sources": [
            {
                "source": {"id": "c1", "type": "collection", "name": "Syllabus"},
                "document": ["Week 3: merge sort and quicksort.", "Week 4: hashing."],
                "metadata": [
                    {"title": "Syllabus", "page": 3, "author": "Dr. Lee"},
                    {"title": "Syllabus", "page": 4},
                ],
                "distances": [0.25, 0.5],
            }
        ],
    }
