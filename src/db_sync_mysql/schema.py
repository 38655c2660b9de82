"""
Source catalog discovery and target structure recreation.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .database import DatabaseHandle
from .errors import IntrospectionError, RecreationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableDescriptor:
    """Everything the sync needs to know about one source table"""
    name: str
    ddl: str
    row_count: int
    columns: Tuple[str, ...]
    # Source schema the table was read from; None means the connection's default
    schema: Optional[str] = None


Catalog = Tuple[TableDescriptor, ...]


def total_rows(catalog: Iterable[TableDescriptor]) -> int:
    return sum(descriptor.row_count for descriptor in catalog)


# Per-dialect catalog queries. ``:schema`` and ``:table`` are bound parameters.
_MYSQL_QUERIES = {
    'tables': (
        "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
        "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE' "
        "ORDER BY TABLE_NAME"
    ),
    'columns': (
        "SELECT COLUMN_NAME FROM INFORMATION_SCHEMA.COLUMNS "
        "WHERE TABLE_SCHEMA = :schema AND TABLE_NAME = :table "
        "ORDER BY ORDINAL_POSITION"
    ),
}

_SQLITE_QUERIES = {
    'tables': (
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
        "ORDER BY name"
    ),
    'ddl': "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :table",
    'columns': "SELECT name FROM pragma_table_info(:table) ORDER BY cid",
}

_QUERIES = {
    'mysql': _MYSQL_QUERIES,
    'mariadb': _MYSQL_QUERIES,
    'sqlite': _SQLITE_QUERIES,
}


async def _gather_or_raise(awaitables: Iterable[Awaitable]) -> List:
    """Run awaitables concurrently and re-raise the first failure

    Every awaitable is allowed to finish so no task is left running after
    an error.
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class SchemaInspector:
    """Read table names, DDL, columns and row counts from the source

    With an explicit ``schema`` every statement names it: catalog filters bind
    it and table references are written ``schema.table``. Without one the
    connection's default database is used throughout.
    """

    def __init__(self, source: DatabaseHandle, schema: Optional[str] = None):
        self.source = source
        self.schema = schema
        try:
            self._queries = _QUERIES[source.dialect_name]
        except KeyError:
            raise IntrospectionError(
                f"Unsupported source database: {source.dialect_name}"
            ) from None
        if source.dialect_name == 'sqlite' and schema not in (None, 'main'):
            raise IntrospectionError(f"SQLite sources only support the main schema, got {schema}")

    @property
    def _schema_param(self) -> Optional[str]:
        return self.schema or self.source.database

    def _qualified(self, table: str) -> str:
        return self.source.qualify(table, self.schema)

    async def _query(self, what: str, sql: str, params: Optional[Dict[str, str]] = None,
                     table: Optional[str] = None) -> list:
        # SQLite's catalog queries have no schema parameter
        params = {key: value for key, value in (params or {}).items() if f":{key}" in sql}
        try:
            return await self.source.execute_query(sql, params)
        except SQLAlchemyError as err:
            raise IntrospectionError(f"Could not read {what}: {err}", table) from err

    async def list_tables(self) -> List[str]:
        rows = await self._query("table list", self._queries['tables'],
                                 {'schema': self._schema_param})
        return [row[0] for row in rows]

    async def get_ddl(self, table: str) -> str:
        if self.source.dialect_name == 'sqlite':
            rows = await self._query("DDL", self._queries['ddl'], {'table': table}, table)
            ddl = rows[0][0] if rows else None
        else:
            # Column 0 is the table name, column 1 the CREATE TABLE statement
            sql = f"SHOW CREATE TABLE {self._qualified(table)}"
            rows = await self._query("DDL", sql, table=table)
            ddl = rows[0][1] if rows else None

        if not ddl:
            raise IntrospectionError("Table disappeared before its DDL could be read", table)
        return ddl

    async def get_columns(self, table: str) -> Tuple[str, ...]:
        params = {'schema': self._schema_param, 'table': table}
        rows = await self._query("columns", self._queries['columns'], params, table)
        if not rows:
            raise IntrospectionError("No columns found", table)
        return tuple(row[0] for row in rows)

    async def get_row_count(self, table: str) -> int:
        """Row count at call time; only ever an estimate of what will be copied"""
        sql = f"SELECT COUNT(*) FROM {self._qualified(table)}"
        rows = await self._query("row count", sql, table=table)
        return int(rows[0][0])

    async def describe_table(self, table: str) -> TableDescriptor:
        ddl, columns, row_count = await _gather_or_raise([
            self.get_ddl(table),
            self.get_columns(table),
            self.get_row_count(table),
        ])
        logger.debug(f"  {table}: {len(columns)} columns, ~{row_count:,} rows")
        return TableDescriptor(name=table, ddl=ddl, row_count=row_count, columns=columns,
                               schema=self.schema)

    async def build_catalog(self, tables: Optional[Sequence[str]] = None) -> Catalog:
        """Describe every table (or only ``tables``) in the source schema

        All tables are described concurrently; the handle's pool size is the
        only limit. Any failure aborts the whole catalog.
        """
        names = await self.list_tables()

        if tables:
            missing = [name for name in tables if name not in names]
            if missing:
                raise IntrospectionError(f"Tables not found in source: {', '.join(missing)}")
            names = list(dict.fromkeys(tables))

        catalog = tuple(await _gather_or_raise(self.describe_table(name) for name in names))
        logger.info(f"Found {len(catalog)} tables, {total_rows(catalog):,} rows in total")
        return catalog


class StructureRecreator:
    """Drop and recreate target tables from captured DDL

    This destroys whatever the target holds under the same table names.
    Foreign key checks must be off on the target connections (see
    ``DatabaseHandle(disable_foreign_keys=True)``) because tables are rebuilt
    in no particular order.
    """

    def __init__(self, target: DatabaseHandle):
        self.target = target

    async def recreate(self, descriptor: TableDescriptor):
        logger.info(f"Recreating table {descriptor.name}")
        try:
            await self.target.execute(f"DROP TABLE IF EXISTS {self.target.quote(descriptor.name)}")
            await self.target.execute(descriptor.ddl)
        except SQLAlchemyError as err:
            raise RecreationError(descriptor.name, err) from err
        logger.info(f"Recreated table {descriptor.name}")

    async def recreate_all(self, catalog: Catalog) -> Dict[str, RecreationError]:
        """Recreate every table concurrently and return the failures by table name

        A failure on one table does not undo the others.
        """
        results = await asyncio.gather(*(self.recreate(d) for d in catalog),
                                       return_exceptions=True)
        failures = {}
        for descriptor, result in zip(catalog, results):
            if isinstance(result, RecreationError):
                logger.error(str(result))
                failures[descriptor.name] = result
            elif isinstance(result, BaseException):
                raise result
        return failures
