from datetime import datetime, timezone

import pytest

NOW = datetime(2022, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_flashdeck.db")
    return db_path


@pytest.fixture
def now():
    """Fixed review instant: 2022-01-01T00:00:00Z."""
    return NOW
