import os
import uuid
from pathlib import Path
from unittest.mock import MagicMock, patch

import psycopg2
import pytest
from psycopg2 import sql

from database.core import DatabaseManager

SCHEMA_FILE = Path(__file__).parent / "database" / "schema.sql"

FAKE_DB_CONFIG = {
    "host": "localhost",
    "port": "5432",
    "database": "messenger",
    "user": "tester",
    "password": "",
}

TEST_DB_CONFIG = {
    "host": os.getenv("TEST_DB_HOST", "localhost"),
    "port": os.getenv("TEST_DB_PORT", "5432"),
    "database": os.getenv("TEST_DB_DATABASE", "postgres"),
    "user": os.getenv("TEST_DB_USER", "postgres"),
    "password": os.getenv("TEST_DB_PASSWORD", ""),
}


@pytest.fixture
def cursor():
    """A psycopg2 cursor stand-in; fetchone answers the schema check."""
    cursor = MagicMock()
    cursor.fetchone.return_value = (1,)
    cursor.description = None
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def connection(cursor):
    conn = MagicMock()
    conn.closed = 0
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


@pytest.fixture
def db(connection, cursor):
    """DatabaseManager wired to a mocked connection."""
    with patch("database.core.psycopg2.connect", return_value=connection):
        manager = DatabaseManager(FAKE_DB_CONFIG, schema="public")
    cursor.reset_mock()
    yield manager


@pytest.fixture
def live_db():
    """DatabaseManager on a scratch schema of a real server, or skip."""
    try:
        admin = psycopg2.connect(connect_timeout=3, **TEST_DB_CONFIG)
    except psycopg2.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    admin.autocommit = True
    schema = f"messenger_test_{uuid.uuid4().hex[:8]}"
    with admin.cursor() as cursor:
        cursor.execute(sql.SQL("CREATE SCHEMA {}").format(sql.Identifier(schema)))
        cursor.execute(sql.SQL("SET search_path TO {}").format(sql.Identifier(schema)))
        cursor.execute(SCHEMA_FILE.read_text(encoding="utf-8"))

    manager = DatabaseManager(TEST_DB_CONFIG, schema=schema)
    yield manager

    manager.close()
    with admin.cursor() as cursor:
        cursor.execute(
            sql.SQL("DROP SCHEMA {} CASCADE").format(sql.Identifier(schema))
        )
    admin.close()
