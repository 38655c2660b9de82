"""
Shared fixtures: a pair of file-backed SQLite databases standing in for the
source and target servers.
"""

import sys
from pathlib import Path

import pytest_asyncio

# Add the src directory to the path so we can import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from db_sync_mysql.database import DatabaseHandle  # noqa: E402


@pytest_asyncio.fixture
async def source(tmp_path):
    handle = DatabaseHandle(f"sqlite+aiosqlite:///{tmp_path / 'source.db'}", 'source', pool_size=4)
    yield handle
    await handle.dispose()


@pytest_asyncio.fixture
async def target(tmp_path):
    handle = DatabaseHandle(f"sqlite+aiosqlite:///{tmp_path / 'target.db'}", 'target', pool_size=4,
                            disable_foreign_keys=True)
    yield handle
    await handle.dispose()
