"""
Tests for the logging helpers.
"""

import logging

from prepchef.utils.logging import get_logger


class TestGetLogger:
    """Tests for get_logger."""

    def test_level_name_is_accepted(self):
        logger = get_logger("prepchef.tests.level_name", "debug")

        assert logger.level == logging.DEBUG

    def test_unknown_level_name_falls_back_to_info(self):
        logger = get_logger("prepchef.tests.unknown_level", "chatty")

        assert logger.level == logging.INFO

    def test_handler_is_added_once(self):
        name = "prepchef.tests.single_handler"
        get_logger(name)
        logger = get_logger(name)

        assert len(logger.handlers) == 1
        assert logger.propagate is False
