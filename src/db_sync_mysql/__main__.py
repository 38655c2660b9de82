#!/usr/bin/env python3
"""
Entry point for the db-sync-mysql CLI command.
This allows the package to be run as: python -m db_sync_mysql
"""

import sys

from .db_sync import main

if __name__ == '__main__':
    sys.exit(main())
