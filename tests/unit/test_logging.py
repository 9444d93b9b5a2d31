import logging

import pytest

from app.utils.my_logging import NOISY_LOGGERS, setup_logging


@pytest.fixture
def reset_library_loggers():
    root_level = logging.getLogger().level
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
    yield
    logging.getLogger().setLevel(root_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_library_loggers_quieted_by_default(reset_library_loggers):
    setup_logging()
    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)


def test_library_loggers_left_alone_when_asked(reset_library_loggers):
    setup_logging(quiet_libraries=False)
    assert all(logging.getLogger(name).level == logging.NOTSET for name in NOISY_LOGGERS)


def test_root_level_follows_settings(reset_library_loggers, monkeypatch):
    from app.config.settings import get_settings

    monkeypatch.setattr(get_settings(), "LOG_LEVEL", "debug")
    setup_logging()
    assert logging.getLogger().level == logging.DEBUG
