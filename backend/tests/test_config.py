"""Settings, logging setup and app wiring."""

import json
import logging

from pharmacy.core.config import Settings
from pharmacy.core.logging import JsonFormatter, setup_logging
from pharmacy.main import create_app
from pharmacy.storage import MemoryStorage, SqlStorage, build_storage


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.STORAGE_BACKEND == "memory"
    assert settings.TOTAL_TOLERANCE == 0.01
    assert settings.RECENT_TRANSACTIONS_DEFAULT == 5
    assert settings.cors_origins == ["*"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("STATS_WINDOW_DAYS", "7")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://apotek.example.org")

    settings = Settings(_env_file=None)

    assert settings.STORAGE_BACKEND == "sql"
    assert settings.STATS_WINDOW_DAYS == 7
    assert settings.cors_origins == ["http://localhost:5173", "https://apotek.example.org"]


def test_build_storage_picks_backend():
    assert isinstance(build_storage(Settings(_env_file=None)), MemoryStorage)

    sql = build_storage(Settings(_env_file=None, STORAGE_BACKEND="sql", DATABASE_URL="sqlite+aiosqlite://"))
    assert isinstance(sql, SqlStorage)


def test_json_formatter():
    record = logging.LogRecord("pharmacy.test", logging.WARNING, __file__, 1, "stock low: %s", ("MED-P500",), None)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "pharmacy.test"
    assert payload["message"] == "stock low: MED-P500"


def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(Settings(_env_file=None, LOG_LEVEL="debug", LOG_JSON=True))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_create_app_wires_state():
    storage = MemoryStorage()
    settings = Settings(_env_file=None, SEED_DEMO_DATA=False, TOTAL_TOLERANCE=0.5)

    app = create_app(settings, storage)

    assert app.state.storage is storage
    assert app.state.settings is settings
    assert app.state.sale_processor.tolerance == 0.5
    assert app.title == settings.PROJECT_NAME


def test_startup_seeds_empty_store():
    from fastapi.testclient import TestClient

    app = create_app(Settings(_env_file=None, SEED_DEMO_DATA=True), MemoryStorage())

    with TestClient(app) as client:
        assert len(client.get("/api/products").json()) == 4
        assert client.get("/api/dashboard/stats").json()["lowStockCount"] == 3


def test_json_formatter_carries_request_context():
    record = logging.LogRecord("pharmacy.api.errors", logging.ERROR, __file__, 1, "Error abc123", (), None)
    record.error_id = "abc123"
    record.method = "GET"
    record.path = "/api/products"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["error_id"] == "abc123"
    assert payload["method"] == "GET"
    assert payload["path"] == "/api/products"
    assert "product_id" not in payload


def test_importing_main_leaves_logging_alone():
    import importlib

    import pharmacy.main

    root = logging.getLogger()
    handlers_before = root.handlers[:]

    module = importlib.reload(pharmacy.main)

    assert root.handlers == handlers_before
    assert not hasattr(module, "app")
