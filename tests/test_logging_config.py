"""Tests for setup_logging() and the configuration defaults."""

import logging

import pytest

from championship.config import FACEIT_API_BASE_URL, ChampionshipConfig
from championship.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    """Tests for console and file handler wiring."""

    def test_creates_log_file(self, tmp_path, restore_root_logger):
        log_file = setup_logging(data_dir=str(tmp_path), run_label="build")
        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("build-")

        logging.getLogger("championship.test").debug("probe trace")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "probe trace" in log_file.read_text(encoding="utf-8")

    def test_repeat_calls_do_not_stack_handlers(self, tmp_path, restore_root_logger):
        setup_logging(data_dir=str(tmp_path))
        setup_logging(data_dir=str(tmp_path))
        assert len(restore_root_logger.handlers) == 2

    def test_http_loggers_quietened(self, tmp_path, restore_root_logger):
        setup_logging(data_dir=str(tmp_path))
        assert logging.getLogger("httpx").level == logging.WARNING


class TestConfigDefaults:
    """Tests for ChampionshipConfig defaults."""

    def test_defaults(self):
        config = ChampionshipConfig()
        assert config.api_base_url == FACEIT_API_BASE_URL
        assert config.probe_upper_bound == 10000
        assert config.page_size == 100
        assert config.stats_concurrency == 5
        assert config.api_key is None
