"""Tests for the zoautil log file setup."""

import logging

import pytest

from zoautil.config import Config
from zoautil.logs import setup_logger


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("zoautil")
    saved = list(logger.handlers)
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved


def _config(log_dir):
    cfg = Config()
    cfg.LOG_DIR = str(log_dir)
    return cfg


def test_creates_log_file(tmp_path, clean_logger):
    log_dir = tmp_path / "logs"
    logger = setup_logger(_config(log_dir))

    logging.getLogger("zoautil.jobs.poller").info("[Poller] Submitted JOB00001")
    for handler in logger.handlers:
        handler.flush()

    files = list(log_dir.glob("zoautil_*.log"))
    assert len(files) == 1
    assert "[Poller] Submitted JOB00001" in files[0].read_text()


def test_setup_is_idempotent(tmp_path, clean_logger):
    cfg = _config(tmp_path)
    setup_logger(cfg)
    setup_logger(cfg)
    file_handlers = [h for h in clean_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1


def test_console_handler(tmp_path, clean_logger):
    cfg = _config(tmp_path)
    setup_logger(cfg, console_level=logging.WARNING)
    setup_logger(cfg, console_level=logging.WARNING)
    console = [h for h in clean_logger.handlers if type(h) is logging.StreamHandler]
    assert len(console) == 1
    assert console[0].level == logging.WARNING
