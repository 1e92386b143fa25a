"""
Tests for the logging helpers.
"""

import logging

import pytest

from TrifocalEstimation.algorithms.geometry.trifocal import reprojection_error
from TrifocalEstimation.logger import get_logger, set_level, setup_logger


@pytest.fixture
def restore_levels():
    """Put the package loggers back to their levels after the test"""
    names = ["TrifocalEstimation", "TrifocalEstimation.trifocal.error"]
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def test_get_logger_is_namespaced():
    assert get_logger("trifocal.solver").name == "TrifocalEstimation.trifocal.solver"


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "trifocal.log"
    logger = setup_logger(level="DEBUG", log_file=str(log_file), console=False,
                          force=True, name="TrifocalEstimation.test_file")

    logger.debug("solve started")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text()
    assert "[DEBUG] [TrifocalEstimation.test_file] solve started" in content

    setup_logger(console=False, force=True, name="TrifocalEstimation.test_file")
    assert logger.handlers == []


def test_setup_logger_keeps_existing_handlers():
    name = "TrifocalEstimation.test_reuse"
    first = setup_logger(force=True, name=name)
    count = len(first.handlers)

    second = setup_logger(level="ERROR", name=name)

    assert second is first
    assert len(second.handlers) == count
    assert second.level == logging.INFO
    setup_logger(console=False, force=True, name=name)


def test_set_level(restore_levels):
    set_level("warning")
    assert logging.getLogger("TrifocalEstimation").level == logging.WARNING

    set_level(logging.DEBUG, "trifocal.error")
    assert get_logger("trifocal.error").level == logging.DEBUG


def test_debug_logs_pixel_reprojection(scene, caplog, restore_levels):
    """At DEBUG the error model reports the reprojection in pixels"""
    set_level("DEBUG", "trifocal.error")
    bearings, px_bearings = scene.bearings(0)

    with caplog.at_level(logging.DEBUG, logger="TrifocalEstimation.trifocal.error"):
        reprojection_error(scene.ground_truth, bearings, px_bearings, scene.intrinsics)

    assert any("px" in r.getMessage() for r in caplog.records)
