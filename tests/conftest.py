"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real PostgreSQL server
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
