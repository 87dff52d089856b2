from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from main import create_app
from utils.sinks import RecordNotifier


ENV_OVERRIDES = (
    "DATABASE_PATH",
    "FONTS_DIR",
    "UPLOADS_DIR",
    "ADMIN_PASSWORD",
    "SEED_SAMPLE_DATA",
    "FIREBASE_SERVICE_ACCOUNT",
    "GOOGLE_SERVICE_ACCOUNT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_SHEET_ID",
)


class RecordingNotifier(RecordNotifier):
    """Keeps submitted records in memory instead of mirroring them."""

    name = "recording"

    def __init__(self):
        self.records = []

    def is_configured(self) -> bool:
        return True

    def _send(self, record):
        self.records.append(record)


class FailingNotifier(RecordNotifier):
    name = "failing"

    def is_configured(self) -> bool:
        return True

    def _send(self, record):
        raise ConnectionError("sink unreachable")


def make_config(tmp_path: Path, **overrides) -> dict:
    raw = {
        "database": {"path": str(tmp_path / "readcheck.db")},
        "storage": {
            "fonts_dir": str(tmp_path / "fonts"),
            "uploads_dir": str(tmp_path / "uploads"),
        },
        "admin": {"password": "secret"},
        "seed": {"sample_data": False},
    }
    raw.update(overrides)
    return config.build_config(raw)


@pytest.fixture
def app_config(tmp_path, monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    return make_config(tmp_path)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(app_config, notifier):
    app = create_app(app_config, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(client):
    """The running app's database handle."""
    return client.app.state.db


@pytest.fixture
def seeded_client(tmp_path, monkeypatch, notifier):
    """A client whose store was seeded with the sample word list and default fonts."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    app = create_app(make_config(tmp_path, seed={"sample_data": True}), notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client
