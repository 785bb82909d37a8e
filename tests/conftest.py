import pytest

from sing_me_a_song_api.app.core.config import settings
from sing_me_a_song_api.app.core.db import init_db


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Point the application at an empty, migrated SQLite file."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    init_db()
    return settings.database_url
