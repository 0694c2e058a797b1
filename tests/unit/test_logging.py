"""Tests for zonemerge.utils.logging module."""

from __future__ import annotations

import logging

from zonemerge.utils.logging import (
    _add_correlation_ids,
    clear_correlation_context,
    configure_logging,
    get_logger,
    set_correlation_context,
)


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level="WARNING", log_format="console")
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_default_settings_do_not_error() -> None:
    configure_logging()


def test_configure_logging_json_format_does_not_error() -> None:
    configure_logging(level="INFO", log_format="json")


def test_get_logger_returns_logger_proxy() -> None:
    configure_logging(level="DEBUG", log_format="console")
    logger = get_logger("test.module")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")


def test_correlation_ids_added_when_set() -> None:
    set_correlation_context(map_id="maps/user-7.json", step=3)

    event = _add_correlation_ids(
        logging.getLogger("test"), "info", {"event": "hello"}
    )

    assert event == {"event": "hello", "map_id": "maps/user-7.json", "step": 3}


def test_correlation_ids_omitted_when_unset() -> None:
    clear_correlation_context()

    event = _add_correlation_ids(
        logging.getLogger("test"), "info", {"event": "hello"}
    )

    assert event == {"event": "hello"}


def test_partial_update_keeps_other_ids() -> None:
    set_correlation_context(map_id="a.json")
    set_correlation_context(step=2)

    event = _add_correlation_ids(logging.getLogger("test"), "info", {})

    assert event["map_id"] == "a.json"
    assert event["step"] == 2
