"""Test environment: in-memory SQLite, fixed signing secret, cheap bcrypt cost."""

import os

# Must be set before any warden module reads settings.
os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-do-not-use"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = "/api"
os.environ["COOKIE_SECURE"] = "false"
