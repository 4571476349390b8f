import logging

from student_records_api.app.core.config import Settings
from student_records_api.app.core.logging_config import setup_logging


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "MONGO_URI", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database_url == "students.db"
    assert settings.port == 5000
    assert settings.cors_origins == ["*"]


def test_mongo_uri_is_accepted_as_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/school")

    assert Settings.from_env().database_url == "mongodb://db:27017/school"


def test_database_url_wins_over_mongo_uri(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "records.db")
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/school")

    assert Settings.from_env().database_url == "records.db"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://school.example ,")
    monkeypatch.setenv("MONGO_TIMEOUT_MS", "250")

    settings = Settings.from_env()

    assert settings.port == 8080
    assert settings.cors_origins == ["http://localhost:3000", "https://school.example"]
    assert settings.mongo_timeout_ms == 250


def test_setup_logging_configures_root_once(monkeypatch, tmp_path):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    logfile = tmp_path / "service.log"

    setup_logging("debug", str(logfile))
    setup_logging("info")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert logging.getLogger("pymongo").level == logging.WARNING
    for handler in root.handlers:
        handler.close()
