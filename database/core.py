# database/core.py
import psycopg2
from contextlib import contextmanager
from psycopg2 import (
    sql,
    errors,
    DatabaseError,  # Base class for everything the server reports
    Error,  # Also covers InterfaceError on an already broken connection
    OperationalError,  # Raised when the server can't be reached
)

from typing import Optional, List, Tuple, Any, Dict, Iterator, Union

from config import DB_CONFIG, SCHEMA_NAME, setup_logger
from ui.console import display_table

Params = Optional[Union[Tuple[Any, ...], Dict[str, Any]]]
Query = Union[str, sql.Composable]


class QueryError(RuntimeError):
    """A statement failed on the server."""


class DuplicateEntryError(QueryError):
    """A statement violated a unique constraint."""


class DatabaseManager:
    def __init__(
        self,
        db_config: Optional[Dict[str, Any]] = None,
        schema: str = SCHEMA_NAME,
    ) -> None:
        """Open the single connection used for the whole session."""
        self.db_config: Dict[str, Any] = dict(db_config or DB_CONFIG)
        self.connection: Optional[psycopg2.extensions.connection] = None
        self.current_schema: str = schema
        self.logger = setup_logger("DBManager")
        self._connect()

    def _connect(self) -> None:
        """Connect and select the schema, or raise ConnectionError."""
        target = "{host}:{port}/{database}".format(**self.db_config)
        try:
            self.connection = psycopg2.connect(**self.db_config)
            self.connection.autocommit = True
            self.logger.info("Connected to %s", target)
        except OperationalError as e:
            self.logger.error("Unable to connect to %s: %s", target, e)
            raise ConnectionError(f"Unable to connect to database: {e}") from e

        try:
            self._set_schema(self.current_schema)
        except (DatabaseError, ValueError) as e:
            self.close()
            raise ConnectionError(str(e)) from e

    def _set_schema(self, schema_name: str) -> None:
        """Verify the schema exists and put it on the search path."""
        with self.connection.cursor() as cursor:
            cursor.execute(
                "SELECT 1 FROM information_schema.schemata WHERE schema_name = %s",
                (schema_name,),
            )
            if not cursor.fetchone():
                raise ValueError(f"Schema '{schema_name}' does not exist")

            cursor.execute(
                sql.SQL("SET search_path TO {}").format(sql.Identifier(schema_name))
            )
        self.current_schema = schema_name
        self.logger.debug("Schema path set to: %s", schema_name)

    @property
    def connected(self) -> bool:
        """Check if the connection is open."""
        return self.connection is not None and not self.connection.closed

    def _require_connection(self) -> psycopg2.extensions.connection:
        if not self.connected:
            raise QueryError("Not connected to database")
        return self.connection

    def _translate_error(self, error: DatabaseError) -> QueryError:
        message = str(error).strip()
        if isinstance(error, errors.UniqueViolation):
            return DuplicateEntryError(message)
        return QueryError(message)

    def execute_query(
        self,
        query: Query,
        params: Params = None,
        fetch: bool = True,
    ) -> Optional[Tuple[List[str], List[Tuple[Any, ...]]]]:
        """Execute a SQL statement, returning (columns, rows) when it yields any."""
        conn = self._require_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params)

                if fetch and cursor.description:
                    columns = [desc[0] for desc in cursor.description]
                    return columns, cursor.fetchall()
                return None

        except DatabaseError as e:
            self.logger.error("Query failed: %s\nQuery: %s\nParams: %s", e, query, params)
            raise self._translate_error(e) from e

    def execute(self, query: Query, params: Params = None) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count."""
        conn = self._require_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params)
                return cursor.rowcount
        except DatabaseError as e:
            self.logger.error("Statement failed: %s\nQuery: %s\nParams: %s", e, query, params)
            raise self._translate_error(e) from e

    def query_rows(self, query: Query, params: Params = None) -> List[List[Optional[str]]]:
        """Return every row with each value converted to its display string."""
        result = self.execute_query(query, params)
        if not result:
            return []
        return [
            [None if value is None else str(value) for value in row]
            for row in result[1]
        ]

    def query_count(self, query: Query, params: Params = None) -> int:
        """Return 1 if the query yields at least one row, 0 otherwise."""
        conn = self._require_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params)
                return 1 if cursor.fetchone() is not None else 0
        except DatabaseError as e:
            self.logger.error("Query failed: %s\nQuery: %s\nParams: %s", e, query, params)
            raise self._translate_error(e) from e

    def query_and_print(self, query: Query, params: Params = None, title: str = "") -> int:
        """Render the query result as a table and return the number of rows."""
        result = self.execute_query(query, params)
        if not result or not result[1]:
            return 0

        columns, rows = result
        display_table(
            title=title,
            columns=[column.replace("_", " ").title() for column in columns],
            data=[[("" if value is None else str(value).strip()) for value in row] for row in rows],
        )
        return len(rows)

    @contextmanager
    def transaction(self) -> Iterator[psycopg2.extensions.cursor]:
        """Yield a cursor whose statements commit or roll back together."""
        conn = self._require_connection()
        conn.autocommit = False
        try:
            with conn.cursor() as cursor:
                yield cursor
            conn.commit()
        except DatabaseError as e:
            conn.rollback()
            self.logger.error("Transaction rolled back: %s", e)
            raise self._translate_error(e) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.autocommit = True

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the connection; safe to call more than once."""
        if not self.connected:
            return
        try:
            self.connection.close()
            self.logger.info("Connection closed")
        except Error as e:
            self.logger.warning("Error while closing connection: %s", e)
