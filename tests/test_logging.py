import logging

import pytest

from riichi_tally.config import Settings
from riichi_tally.logging import LOG_FORMAT, setup_logging


@pytest.fixture(autouse=True)
def cleanup_root_logger():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


def test_stdout_only_by_default():
    assert setup_logging(Settings(log_dir=None, log_level="info")) is None
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT


def test_log_file_under_configured_dir(tmp_path):
    log_dir = tmp_path / "logs"
    path = setup_logging(Settings(log_dir=str(log_dir), log_level="debug"))
    assert path.parent == log_dir
    assert path.name.startswith("riichi-tally_")
    assert logging.getLogger().level == logging.DEBUG
    assert len(logging.getLogger().handlers) == 2


def test_repeated_setup_does_not_stack_handlers():
    setup_logging(Settings(log_dir=None))
    setup_logging(Settings(log_dir=None))
    assert len(logging.getLogger().handlers) == 1


def test_client_libraries_are_quieted():
    setup_logging(Settings(log_dir=None, log_level="DEBUG"))
    assert logging.getLogger("httpx").level == logging.WARNING


def test_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging(Settings(log_level="loud"))
