"""Pytest fixtures shared across test modules."""

import sqlite3

import pytest

import database
from models import CanonicalPage


def make_page(**overrides) -> CanonicalPage:
    defaults = {
        "url": "https://example.com/page",
        "title": "Example Page",
        "meta_description": "An example page description.",
        "word_count": 500,
        "status_code": 200,
        "content": "Example content about the page.",
    }
    defaults.update(overrides)
    return CanonicalPage(**defaults)


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "crawl_insights.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    database.init_db()
    return path


def stored_row_count(db_path, session_id: str) -> int:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM crawls WHERE session_id = ?", (session_id,)).fetchone()[0]
    finally:
        conn.close()
