"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or image provider
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_MODE", "header")
os.environ.setdefault("LOG_FORMAT", "text")
