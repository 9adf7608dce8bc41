import logging

import pytest
from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch):
    """Keeps the real ~/.config/txtempl/config.toml out of every test."""
    user_config = tmp_path / "user_config" / "config.toml"
    monkeypatch.setattr("txtempl.config.loader.USER_CONFIG_FILE", user_config)
    return user_config


@pytest.fixture(autouse=True)
def restore_package_logger():
    """CLI tests attach a stream handler to the txtempl logger; undo it after each test."""
    package_logger = logging.getLogger("txtempl")
    saved_handlers, saved_level = list(package_logger.handlers), package_logger.level
    yield
    package_logger.handlers[:] = saved_handlers
    package_logger.setLevel(saved_level)
