#!/usr/bin/env python3
"""
Setup script for db-sync-mysql package.
"""

import os
from setuptools import setup, find_packages

# Read README for long description
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="db-sync-mysql",
    version="1.0.0",
    author="Harish Karumuthil",
    author_email="harish2704@gmail.com",
    description="MySQL Database Sync Tool - Recreate tables from source DDL and stream rows across in batches",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/harish2704/db-sync-mysql",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Framework :: AsyncIO",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Utilities"
    ],
    python_requires=">=3.10",
    install_requires=[
        "SQLAlchemy[asyncio]>=2.0",
        "aiomysql>=0.2",
        "aiosqlite>=0.19",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        'console_scripts': [
            'db-sync-mysql=db_sync_mysql.db_sync:main',
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
