import io
import logging

from fatura_parser.logging_setup import configure_logging, get_logger, reset_logging


def test_get_logger_is_silent_until_configured():
    get_logger("fatura_parser.test")
    handlers = logging.getLogger("fatura_parser").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_configure_logging_once():
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)
    configure_logging("ERROR", stream=io.StringIO())

    pkg = logging.getLogger("fatura_parser")
    assert pkg.level == logging.DEBUG
    assert len(pkg.handlers) == 1
    get_logger("fatura_parser.test").debug("hello")
    assert "fatura_parser.test DEBUG hello" in stream.getvalue()


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("FATURA_PARSER_LOG_LEVEL", "info")
    configure_logging(stream=io.StringIO())
    assert logging.getLogger("fatura_parser").level == logging.INFO


def test_unknown_level_defaults_to_warning():
    configure_logging("chatty", stream=io.StringIO())
    assert logging.getLogger("fatura_parser").level == logging.WARNING


def test_reset_allows_reconfiguring_with_custom_format():
    configure_logging("ERROR", stream=io.StringIO())
    reset_logging()

    stream = io.StringIO()
    configure_logging("INFO", fmt="%(levelname)s:%(message)s", stream=stream)
    get_logger("fatura_parser.test").info("again")
    assert stream.getvalue() == "INFO:again\n"
    assert logging.getLogger("fatura_parser").propagate is False
