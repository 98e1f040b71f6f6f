"""Root conftest — shared test configuration."""

import os

# Tests never talk to a real PostgreSQL or use a production signing key
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("JWT_SIGNING_KEY", "test-signing-key")
os.environ.setdefault("LOG_FORMAT", "text")
