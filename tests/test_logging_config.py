import logging

import pytest

from trackas.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging(logging.INFO)


def test_level_by_name():
    assert setup_logging("debug").level == logging.DEBUG
    assert setup_logging("chatty").level == logging.INFO


def test_repeated_setup_does_not_stack_handlers():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_log_file(tmp_path):
    log_file = tmp_path / "trackas.log"
    logger = setup_logging("INFO", str(log_file))

    logging.getLogger("trackas.ledger").info("Registered A123")
    for handler in logger.handlers:
        handler.flush()

    assert "trackas.ledger - INFO - Registered A123" in log_file.read_text(encoding="utf-8")
