"""
Shared fixtures: a scripted stand-in for the Firebase client and an
app wired to temp files.
"""

import pytest

from config import Settings
from main import create_app


class FakeFetcher:
    """
    Returns queued snapshots in order; the last one repeats forever.
    Queue an Exception instance to make that fetch fail.
    """

    def __init__(self, *snapshots, sign_in_error=None):
        self.snapshots = list(snapshots) or [{}]
        self.sign_in_error = sign_in_error
        self.signed_in = False
        self.calls = 0

    async def sign_in_anonymously(self):
        if self.sign_in_error is not None:
            raise self.sign_in_error
        self.signed_in = True

    async def fetch_snapshot(self):
        self.calls += 1
        item = self.snapshots.pop(0) if len(self.snapshots) > 1 else self.snapshots[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self):
        pass


def keyed(key, **extra):
    return {"key": key, **extra}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        firebase_api_key="test-key",
        firebase_database_url="https://example.firebaseio.test",
        data_file=str(tmp_path / "data.json"),
        users_file=str(tmp_path / "users.json"),
        poll_interval=3600,
    )


@pytest.fixture
def make_app(settings):
    def _make(*snapshots, **kwargs):
        fetcher = FakeFetcher(*snapshots, **kwargs)
        return create_app(settings, fetcher=fetcher), fetcher

    return _make
