# src/amtconfig/tests/test_logging/test_builder_setup.py
import logging

import pytest

from amtconfig.config import get_settings
from amtconfig.core.logging.builder import make_dict_config, setup_logging


# Create a minimal Settings-like object for testing
class DummySettings:
    LOG_FORMAT = "json"
    LOG_LEVEL = "INFO"
    LOG_TO_STDOUT = False
    LOG_DIR = None  # will be set in test
    LOG_MAX_BYTES = 1000
    LOG_BACKUP_COUNT = 1
    ENV = "development"
    ENABLE_SQL_LOGGING = False


@pytest.fixture
def restore_logging():
    yield
    setup_logging(get_settings())


def test_make_dict_config_file_handlers(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    cfg = make_dict_config(settings)
    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"].endswith("amtconfig.log")
    assert cfg["handlers"]["error_file"]["formatter"] == "json"
    assert cfg["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"


def test_make_dict_config_stdout_only():
    settings = DummySettings()
    settings.LOG_TO_STDOUT = True
    settings.LOG_FORMAT = "text"
    settings.ENABLE_SQL_LOGGING = True
    cfg = make_dict_config(settings)
    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["handlers"]["console"]["formatter"] == "standard"
    assert cfg["loggers"]["sqlalchemy.engine"]["level"] == "INFO"
    # every handler runs context and redaction
    assert all(h["filters"] == ["context", "redact"] for h in cfg["handlers"].values())


def test_setup_logging_creates_log_dir(tmp_path, restore_logging):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path / "logs"
    # ensure DIR does not exist
    assert not settings.LOG_DIR.exists()
    setup_logging(settings)
    # setup should create log dir
    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert any(True for _ in root.handlers)


def test_secret_extras_are_redacted_in_files(tmp_path, restore_logging):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    setup_logging(settings)

    logging.getLogger("amtconfig.test").warning("secret.logged", extra={"mps_password": "hunter2"})
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = (tmp_path / "amtconfig.log").read_text(encoding="utf-8")
    assert "secret.logged" in content
    assert "hunter2" not in content
