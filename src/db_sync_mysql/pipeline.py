"""
Streaming table copy with batched inserts.

Rows are pulled from the source one at a time and buffered until a batch is
full. The batch is then written with a single multi-row INSERT, and the next
row is not read until that INSERT has committed. A table therefore never has
more than one batch of rows in memory, however large it is.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import column, select, table

from .database import DatabaseHandle
from .errors import CopyError
from .progress import RunProgress
from .schema import Catalog, TableDescriptor

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


@dataclass
class CopyResult:
    """What happened to one table's data"""
    table: str
    rows_copied: int = 0
    flushes: int = 0
    error: Optional[CopyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchCopyPipeline:
    """Copy table data from ``source`` to ``target`` in batches of ``batch_size`` rows"""

    def __init__(self, source: DatabaseHandle, target: DatabaseHandle,
                 progress: RunProgress, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.source = source
        self.target = target
        self.progress = progress
        self.batch_size = batch_size

    async def copy_table(self, descriptor: TableDescriptor) -> CopyResult:
        """Copy one table; raises CopyError on the first failed read or insert"""
        result = CopyResult(descriptor.name)
        await self._copy(descriptor, result)
        return result

    async def copy_all(self, catalog: Catalog) -> List[CopyResult]:
        """Copy every table concurrently

        A failing table is recorded in its CopyResult; the other tables keep
        going.
        """
        results = [CopyResult(descriptor.name) for descriptor in catalog]
        outcomes = await asyncio.gather(
            *(self._copy(descriptor, result) for descriptor, result in zip(catalog, results)),
            return_exceptions=True,
        )
        for result, outcome in zip(results, outcomes):
            if isinstance(outcome, CopyError):
                logger.error(str(outcome))
                result.error = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
        return results

    async def _copy(self, descriptor: TableDescriptor, result: CopyResult):
        logger.info(f"reading table {descriptor.name}")
        width = len(descriptor.columns)
        source_table = table(descriptor.name, *(column(name) for name in descriptor.columns),
                             schema=descriptor.schema)
        batch: List[Tuple[Any, ...]] = []

        try:
            async with self.source.stream_query(select(source_table)) as rows:
                async for row in rows:
                    if len(row) != width:
                        raise ValueError(f"row has {len(row)} values, expected {width}")
                    batch.append(tuple(row))
                    if len(batch) >= self.batch_size:
                        await self._flush(descriptor, batch, result)
                        batch = []

            if batch:
                await self._flush(descriptor, batch, result)
        except Exception as err:
            raise CopyError(descriptor.name, result.rows_copied, err) from err

        logger.info(f"Finished copying table: {descriptor.name}")

    async def _flush(self, descriptor: TableDescriptor, batch: Sequence[Tuple[Any, ...]],
                     result: CopyResult):
        await self.target.insert_rows(descriptor.name, descriptor.columns, batch)
        result.rows_copied += len(batch)
        result.flushes += 1

        snapshot = await self.progress.advance(len(batch))
        logger.info(f"{snapshot.processed}/{snapshot.total} - {snapshot} | "
                    f"Source Pool: {self.source.in_use} Target Pool: {self.target.in_use}")
