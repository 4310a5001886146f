"""Tests for logging helpers."""

import logging

import pytest

from logger import LOGGER_NAME, ProgressTracker, _sanitize_config, setup_logging


@pytest.fixture
def restore_logger():
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


def test_progress_tracker_counts():
    with ProgressTracker(total_items=3, item_type='posts') as tracker:
        tracker.increment(success=True)
        tracker.increment(success=False)
        tracker.increment()

    assert tracker.processed_items == 3
    assert tracker.successful_items == 2
    assert tracker.failed_items == 1


def test_passwords_are_redacted():
    config = {'wordpress': {'url': 'https://b.example.com', 'username': 'admin', 'password': 'secret'}}

    sanitized = _sanitize_config(config)

    assert sanitized['wordpress']['password'] == '***REDACTED***'
    assert sanitized['wordpress']['username'] == 'admin'
    assert config['wordpress']['password'] == 'secret'


def test_setup_logging_levels(restore_logger, tmp_path):
    logger = setup_logging(verbosity=2, log_file=str(tmp_path / 'export.log'))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    assert setup_logging(level='error').level == logging.ERROR

    with pytest.raises(ValueError):
        setup_logging(level='loud')
