import logging

import pytest

from astrotarget.logging_config import setup_logging

CONFIGURED_LOGGERS = ("", "astrotarget.algorithms", "astrotarget.utils", "numba")


@pytest.fixture
def restore_logging():
    saved = {}
    for name in CONFIGURED_LOGGERS:
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate


def test_setup_logging_routes_package_records_to_files(tmp_path, restore_logging):
    log_dir = tmp_path / "logs"
    setup_logging(log_dir=log_dir, console_level="WARNING")

    logging.getLogger("astrotarget.algorithms.lambert.izzo").debug("iteration details")
    logging.getLogger("astrotarget.utils.conversions").info("conversion details")
    logging.getLogger("astrotarget.algorithms.lambert.batch").error("batch failed")
    for handler in logging.getLogger("astrotarget.algorithms").handlers:
        handler.flush()
    for handler in logging.getLogger("astrotarget.utils").handlers:
        handler.flush()

    main_log = (log_dir / "astrotarget.log").read_text(encoding="utf8")
    error_log = (log_dir / "error.log").read_text(encoding="utf8")
    assert "iteration details" in main_log
    assert "conversion details" in main_log
    assert "batch failed" in error_log
    assert "iteration details" not in error_log


def test_numba_compilation_messages_are_quiet(tmp_path, restore_logging):
    setup_logging(log_dir=tmp_path)

    assert logging.getLogger("numba").level == logging.WARNING
    assert not logging.getLogger("astrotarget.algorithms").propagate
