"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!!"
TEST_CLIENT_ORIGIN = "https://todo.example.com"

_DEFAULT_ENV_VARS: dict[str, str] = {
    "GOOGLE_CLIENT_ID": "test-client-id",
    "GOOGLE_CLIENT_SECRET": "test-client-secret",
    "GOOGLE_REDIRECT_URI": "https://api.todo.example.com/auth/callback",
    "JWT_SECRET": TEST_JWT_SECRET,
    "CLIENT_ORIGIN": TEST_CLIENT_ORIGIN,
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
