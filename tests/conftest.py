from datetime import datetime

import pytest

NOW = datetime(2024, 3, 15, 14, 30)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_bigo.db")
    return db_path


@pytest.fixture
def now():
    """A fixed mid-afternoon moment so day boundaries are predictable."""
    return NOW
