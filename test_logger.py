"""Tests for the shared logger helpers."""
import logging

from utils.logger import ROOT_LOGGER_NAME, get_logger, setup_logger


def test_module_loggers_are_named_children():
    logger = get_logger("archive.bridge")

    assert logger.name == f"{ROOT_LOGGER_NAME}.archive.bridge"
    assert logger.propagate


def test_distinct_names_give_distinct_loggers():
    assert get_logger("session") is not get_logger("playback.scheduler")
    assert get_logger("session") is get_logger("session")


def test_root_logger_is_configured_once():
    root = setup_logger()
    handlers = list(root.handlers)

    assert get_logger() is root
    assert setup_logger() is root
    assert root.handlers == handlers
    assert any(isinstance(h, logging.StreamHandler) for h in handlers)


def test_child_records_reach_root_handlers():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    root = setup_logger()
    handler = Collect(level=logging.DEBUG)
    root.addHandler(handler)
    try:
        get_logger("state.history").warning("evicted")
    finally:
        root.removeHandler(handler)

    assert [(r.name, r.getMessage()) for r in records] == [("sketchpad.state.history", "evicted")]
