"""Test package. Environment defaults must be in place before accounts is imported."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
