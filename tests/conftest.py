"""Shared test configuration.

The app reads DB_PATH at import time, so the environment is prepared here,
before any test module imports studyvisa.main.
"""

import os
import tempfile
from pathlib import Path

import pytest

_TMP = Path(tempfile.mkdtemp(prefix="studyvisa-tests-"))
os.environ["DB_PATH"] = str(_TMP / "test.sqlite3")
os.environ["APP_ENV"] = "development"
os.environ["ADMIN_TOKEN"] = "test-admin-token"


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": "test-admin-token"}
