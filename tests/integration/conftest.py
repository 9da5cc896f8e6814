import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from doctransform.config.settings import Settings
from doctransform.database.connection import close_pool, get_connection, init_pool

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id BIGSERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL,
    original_file_name TEXT NOT NULL,
    storage_key TEXT NOT NULL,
    file_type TEXT NOT NULL,
    file_size BIGINT NOT NULL,
    is_scan BOOLEAN,
    extracted_text TEXT
);
CREATE TABLE IF NOT EXISTS processing_jobs (
    id BIGSERIAL PRIMARY KEY,
    document_id BIGINT NOT NULL REFERENCES documents (id),
    user_id BIGINT NOT NULL,
    output_format TEXT NOT NULL,
    artifact_key TEXT,
    artifact_url TEXT,
    result_text TEXT,
    translate_from TEXT NOT NULL DEFAULT 'none',
    translate_to TEXT NOT NULL DEFAULT 'none',
    ocr_languages TEXT NOT NULL DEFAULT 'eng,rus,uzb',
    preserve_structure BOOLEAN NOT NULL DEFAULT TRUE,
    status TEXT NOT NULL DEFAULT 'pending',
    error_message TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    completed_at TIMESTAMPTZ
);
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "doctransform_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(_SCHEMA)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[int], None, None]:
    """Collects document ids; their jobs and rows are deleted after the test."""
    document_ids: list[int] = []
    yield document_ids
    if not document_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for document_id in document_ids:
                cur.execute("DELETE FROM processing_jobs WHERE document_id = %s", (document_id,))
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        conn.commit()


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[int],
) -> int:
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO documents
            (user_id, original_file_name, storage_key, file_type, file_size, is_scan)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (10, "report.docx", "uploads/report.docx", "docx", 1024, False),
        )
        row = cur.fetchone()
        assert row is not None
        document_id = int(row[0])
    db_conn.commit()
    integration_cleanup.append(document_id)
    return document_id


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def artifacts_root(tmp_path: Path) -> Path:
    return tmp_path / "artifacts"
