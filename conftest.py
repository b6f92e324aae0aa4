"""Global pytest configuration."""

import os

# Keep tests independent of a developer's .env before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("COOKIE_SECRET", "test-cookie-secret")
os.environ.setdefault("EXIT_ON_UNCAUGHT_EXCEPTION", "false")
