import logging

import pytest

from ghm_landscape.logging_utils import (log_pipeline_end, log_pipeline_start,
                                         log_section, setup_logging)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"

    logger = setup_logging('INFO', 'batch', log_file=log_file, format_style='simple')
    logger.info("region Alpha done")
    logger.debug("not written")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logger.name == 'ghm_landscape.batch'
    assert log_file.read_text().splitlines() == ["INFO: region Alpha done"]


def test_setup_logging_replaces_existing_handlers(restore_root_logger):
    setup_logging('DEBUG')
    setup_logging('DEBUG')

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.DEBUG


def test_pipeline_banners(caplog):
    logger = logging.getLogger('ghm_landscape.test')

    with caplog.at_level(logging.INFO, logger='ghm_landscape'):
        log_pipeline_start(logger, 'ghm landscape metrics', {'processing': {'scale': 1000}})
        log_section(logger, 'region Alpha')
        log_pipeline_end(logger, 'ghm landscape metrics', success=False, elapsed_time=75)

    assert "Starting ghm landscape metrics" in caplog.text
    assert "processing: {'scale': 1000}" in caplog.text
    assert "--- region Alpha ---" in caplog.text
    assert "ghm landscape metrics FAILED after 1m 15s" in caplog.text
