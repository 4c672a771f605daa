"""Root conftest: shared test configuration."""

import os

# Tests never touch a real PostgreSQL; SQLite only understands SERIALIZABLE
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("PURCHASE_ISOLATION_LEVEL", "SERIALIZABLE")
os.environ.setdefault("LOG_FORMAT", "text")
