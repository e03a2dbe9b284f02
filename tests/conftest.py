import sqlite3
from pathlib import Path

import pytest

from main import create_app

USERS_DDL = """
CREATE TABLE users (
    id     INTEGER PRIMARY KEY,
    name   TEXT NOT NULL,
    score  REAL,
    avatar BLOB,
    note   TEXT
)
"""

USERS_ROWS = [
    (1, "alice", 9.5, b"\x00\x01", "first"),
    (2, "bob", None, None, None),
    (3, "Zoë", 7.25, b"", ""),
]


def execute_sqlite_queries(db_file: Path, *queries: str):
    conn = sqlite3.connect(database=str(db_file))
    try:
        with conn:
            for q in queries:
                conn.execute(q)
    finally:
        conn.close()


@pytest.fixture
def sqlite_file(tmp_path: Path) -> Path:
    db_file = tmp_path / "gateway.sqlite"
    execute_sqlite_queries(db_file, USERS_DDL)
    conn = sqlite3.connect(database=str(db_file))
    try:
        with conn:
            conn.executemany("INSERT INTO users VALUES (?, ?, ?, ?, ?)", USERS_ROWS)
    finally:
        conn.close()
    return db_file


@pytest.fixture
def sqlite_dsn(sqlite_file: Path) -> str:
    return f"sqlite:///{sqlite_file}"


@pytest.fixture
def app(sqlite_dsn):
    app = create_app(sqlite_dsn)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
