# db/sql_client.py
import logging
from typing import List

from config import DEFAULT_FETCH_SIZE
from db.connections import ConnectionSettings, connect
from db.materializer import close_cursor, materialize
from errors import QueryExecutionError
from models import Record

LOG = logging.getLogger(__name__)


def close_connection(conn) -> None:
    """Close the connection; a failure here is logged, never raised over the result or real error."""
    try:
        conn.close()
    except Exception as e:
        LOG.warning("failed to close connection: %s", e)


def run_query(settings: ConnectionSettings, sql: str, fetch_size: int = DEFAULT_FETCH_SIZE) -> List[Record]:
    """
    Run one statement verbatim on a fresh connection and return its rows.
    The connection and cursor are closed whatever happens.
    """
    conn = connect(settings)
    try:
        try:
            cur = conn.cursor()
        except Exception as e:
            raise QueryExecutionError("dispatch", f"query execution failed: {e}") from e
        try:
            try:
                cur.execute(sql)
            except Exception as e:
                raise QueryExecutionError("dispatch", f"query execution failed: {e}") from e
            rows = materialize(cur, fetch_size)
        finally:
            close_cursor(cur)
    finally:
        close_connection(conn)
    LOG.debug("query returned %d rows", len(rows))
    return rows
