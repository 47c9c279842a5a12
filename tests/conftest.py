"""Process-wide test settings. Must run before app modules build the engine at import time."""

import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret-with-at-least-32-chars")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
