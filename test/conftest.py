"""
Test Configuration

Environment setup MUST happen before any application import: settings are
read once at import time.

Architecture:
- Unit tests (test/**/unit/): in-memory fakes and mocks, no infrastructure
- Integration tests (test/**/integration/): real SQLAlchemy against SQLite (aiosqlite)
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['DB_CREATE_TABLES_ON_STARTUP'] = 'false'
    os.environ['BLOB_STORE_BACKEND'] = 'local'
    os.environ['SECRET_KEY'] = 'test_secret_key'
    os.environ['ALGORITHM'] = 'HS256'
    os.environ.pop('JWT_ISSUER_URI', None)
    os.environ.pop('JWT_AUDIENCE', None)


# Call immediately to set env vars before any imports
_early_setup_test_environment()
