import os
import tempfile

# settings are read at import time, so point them at a throwaway database first
_DB_DIR = tempfile.mkdtemp(prefix="busseats-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ.setdefault("SENTRY_DSN", "")

import pytest

from busseats.schemas.layout import LayoutConfig


@pytest.fixture
def sleeper_config() -> LayoutConfig:
    return LayoutConfig(rows=10, left_upper_seats=1, left_lower_seats=1, right_upper_seats=1, right_lower_seats=1)


@pytest.fixture
def seater_config() -> LayoutConfig:
    return LayoutConfig(rows=10, left_upper_seats=0, left_lower_seats=2, right_upper_seats=0, right_lower_seats=2)
