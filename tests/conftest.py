import pytest

from database import DatabaseManager


@pytest.fixture
def db(tmp_path):
    return DatabaseManager(f"sqlite:///{tmp_path / 'scanner.db'}")
