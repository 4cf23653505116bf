import logging

from app.core.logging import configure_logging


def test_configure_logging_accepts_level_names():
    configure_logging("debug")
    assert logging.getLogger("app").level == logging.DEBUG

    configure_logging(" warning ")
    assert logging.getLogger("app").level == logging.WARNING


def test_configure_logging_falls_back_to_info():
    configure_logging("chatty")
    assert logging.getLogger("app").level == logging.INFO

    configure_logging("")
    assert logging.getLogger("app").level == logging.INFO
