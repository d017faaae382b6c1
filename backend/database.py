"""SQLite storage for crawl rows and analysis results.

Table: crawls
- id (integer, primary key)
- session_id (text)
- url, title, meta_description (text)
- word_count, status_code (integer)
- created_at (datetime)

Table: analyses
- session_id (text, primary key)
- result_json (text)
- created_at (datetime)
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone

from config import DB_PATH, STORAGE_BATCH_SIZE
from errors import StorageError
from models import AnalysisResult, CanonicalPage

logger = logging.getLogger(__name__)


def get_connection() -> sqlite3.Connection:
    """Return a connection to the SQLite database."""
    try:
        conn = sqlite3.connect(DB_PATH)
    except sqlite3.Error as e:
        raise StorageError(f"Could not open database at {DB_PATH}: {e}") from e
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the crawls and analyses tables if they do not exist."""
    conn = get_connection()
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS crawls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                url TEXT,
                title TEXT,
                meta_description TEXT,
                word_count INTEGER,
                status_code INTEGER,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_crawls_session ON crawls (session_id)")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analyses (
                session_id TEXT PRIMARY KEY,
                result_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def append_rows(session_id: str, pages: list[CanonicalPage], batch_size: int = STORAGE_BATCH_SIZE) -> bool:
    """
    Insert `pages` for a session in input order, one transaction per chunk.
    A failed chunk is logged and the remaining chunks are still attempted.
    Returns True only if every chunk was stored.
    """
    batch_size = max(1, int(batch_size))
    created_at = _now()
    stored = 0
    failed_chunks = 0

    conn = get_connection()
    try:
        for offset in range(0, len(pages), batch_size):
            chunk = pages[offset : offset + batch_size]
            try:
                with conn:
                    conn.executemany(
                        """
                        INSERT INTO crawls
                            (session_id, url, title, meta_description, word_count, status_code, created_at)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                session_id,
                                page.url,
                                page.title,
                                page.meta_description,
                                page.word_count,
                                page.status_code,
                                created_at,
                            )
                            for page in chunk
                        ],
                    )
                stored += len(chunk)
            except (sqlite3.Error, OverflowError):
                # OverflowError: ints beyond SQLite INTEGER range.
                failed_chunks += 1
                logger.exception(
                    "Database storage error: session=%s rows %d-%d",
                    session_id,
                    offset,
                    offset + len(chunk) - 1,
                )
    finally:
        conn.close()

    logger.info("Stored %d/%d pages for session %s", stored, len(pages), session_id)
    return failed_chunks == 0


def save_analysis(session_id: str, result: AnalysisResult) -> None:
    """Store the analysis result for later retrieval by session id."""
    conn = get_connection()
    try:
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO analyses (session_id, result_json, created_at) VALUES (?, ?, ?)",
                (session_id, json.dumps(result), _now()),
            )
    except sqlite3.Error as e:
        raise StorageError(f"Could not store analysis for {session_id}: {e}") from e
    finally:
        conn.close()


def get_analysis(session_id: str) -> dict | None:
    """Fetch a stored analysis by session id. Returns the parsed result or None."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT result_json FROM analyses WHERE session_id = ?",
            (session_id,),
        ).fetchone()
    except sqlite3.Error as e:
        raise StorageError(f"Could not read analysis for {session_id}: {e}") from e
    finally:
        conn.close()

    if row is None:
        return None
    return json.loads(row["result_json"])
