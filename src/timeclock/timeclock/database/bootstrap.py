from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable, Union

from .connection import DBConfig, DatabaseConnection

log = logging.getLogger(__name__)

# schema.sql names a database for manual use in the mysql client; the
# configured DB_NAME wins when applied from here.
_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# A statement ends at ';' unless the ';' sits inside a quoted literal.
_STATEMENT = re.compile(r"""(?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|[^;'"])+""", re.S)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema script into executable statements."""
    sql = _LINE_COMMENT.sub("", _DB_SELECTION.sub("", sql))
    for match in _STATEMENT.finditer(sql):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect(with_database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> int:
    """Create the database if needed and run every statement of ``schema_path``.

    Tables use ``CREATE TABLE IF NOT EXISTS`` so this is safe on every start.
    Returns the number of statements executed.
    """
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    statements = list(iter_sql_statements(schema_path.read_text(encoding="utf-8")))

    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect()) as conn:
        with closing(conn.cursor()) as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()

    log.info("Applied %s (%d statements) to %s", schema_path.name, len(statements), target.describe())
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return sorted(row[0] for row in cur.fetchall())
