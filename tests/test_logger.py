"""Tests for logging helpers."""

import logging

import pytest

from mathmark.utils.logger import ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture()
def _restore_level():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = root.level
    yield
    root.setLevel(level)


class TestGetLogger:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mymodule", "mathmark.mymodule"),
            ("mathmark", "mathmark"),
            ("mathmark.parser", "mathmark.parser"),
            ("mathmarkish", "mathmark.mathmarkish"),
        ],
    )
    def test_namespaced(self, name: str, expected: str) -> None:
        assert get_logger(name).name == expected


@pytest.mark.usefixtures("_restore_level")
class TestConfigureLogging:
    @pytest.mark.parametrize(
        "verbosity,level",
        [(0, logging.ERROR), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_levels(self, verbosity: int, level: int) -> None:
        assert configure_logging(verbosity) == level
        assert logging.getLogger(ROOT_LOGGER_NAME).level == level
