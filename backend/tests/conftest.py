"""Root conftest — shared test configuration."""

import os

# Settings are read once per process (lru_cache); set them before any app import
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault(
    "SESSION_SECRET", "test-session-secret-with-at-least-32-bytes",
)
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
