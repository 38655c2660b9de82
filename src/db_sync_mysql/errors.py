"""
Exceptions raised while replicating a database.

Every error carries the table it concerns (when there is one) so the caller can
decide whether to rerun that table.
"""

from typing import Optional


class SyncError(Exception):
    """Base class for replication failures"""


class IntrospectionError(SyncError):
    """Reading the source catalog failed"""

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        if table:
            message = f"{message} (table '{table}')"
        super().__init__(message)


class RecreationError(SyncError):
    """Dropping or creating a table on the target failed"""

    phase = "recreate"

    def __init__(self, table: str, cause: BaseException):
        self.table = table
        self.cause = cause
        super().__init__(f"Could not recreate table '{table}': {cause}")


class CopyError(SyncError):
    """Reading rows from the source or inserting a batch into the target failed"""

    phase = "copy"

    def __init__(self, table: str, rows_committed: int, cause: BaseException):
        self.table = table
        self.rows_committed = rows_committed
        self.cause = cause
        super().__init__(
            f"Copy of table '{table}' failed after {rows_committed} committed rows: {cause}"
        )
