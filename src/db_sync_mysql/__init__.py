"""
MySQL Database Sync Tool - Replicate a MySQL database table by table into another instance

This package provides a CLI tool and an asyncio API that copy every table of a
source database into a target database. Table structures are recreated from
the source's own DDL and rows are streamed across in batched multi-row INSERTs,
never holding more than one batch per table in memory.

Main features:
- Concurrent catalog discovery (DDL, columns, row counts)
- Drop-and-recreate of target tables with foreign key checks disabled
- Batched streaming copy with backpressure between source reads and target writes
- Live progress with ETA, rows/sec and connection pool usage
- Optional SSH tunnels, config file or command-line support

Usage:
    db-sync-mysql --config config.json
    db-sync-mysql --source-host source-db.com --target-host target-db.com ...
"""

__version__ = "1.0.0"
__author__ = "Harish Karumuthil"
__email__ = "harish2704@gmail.com"
__license__ = "MIT"

from .database import DatabaseHandle
from .db_sync import DatabaseSyncTool, SSHTunnelManager, SyncReport, replicate
from .errors import CopyError, IntrospectionError, RecreationError, SyncError
from .pipeline import BatchCopyPipeline, CopyResult
from .progress import RunProgress, get_progress
from .schema import SchemaInspector, StructureRecreator, TableDescriptor

__all__ = [
    "DatabaseSyncTool",
    "SSHTunnelManager",
    "SyncReport",
    "replicate",
    "DatabaseHandle",
    "SchemaInspector",
    "StructureRecreator",
    "TableDescriptor",
    "BatchCopyPipeline",
    "CopyResult",
    "RunProgress",
    "get_progress",
    "SyncError",
    "IntrospectionError",
    "RecreationError",
    "CopyError",
]
