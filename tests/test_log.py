import io

import pytest

from dilemma.log import LogLevel, Logger, get_logger, log_debug, log_error, log_info, log_warning


def test_disabled_logger_writes_nothing():
    stream = io.StringIO()
    Logger(stream=stream).log(LogLevel.ERROR, "boom")
    assert stream.getvalue() == ""


def test_enabled_logger_line_format():
    stream = io.StringIO()
    Logger(enabled=True, stream=stream).log(LogLevel.INFO, "hello")
    output = stream.getvalue()
    assert output.startswith("[INFO ] ")
    assert output.endswith(" - hello\n")
    assert len(output) == len("[INFO ] 2000-01-01 00:00:00 - hello\n")
    timestamp = output[8:27]
    assert [timestamp[i] for i in (4, 7, 10, 13, 16)] == ["-", "-", " ", ":", ":"]


@pytest.mark.parametrize(
    "level,prefix",
    [
        (LogLevel.WARNING, "[WARN ]"),
        (LogLevel.ERROR, "[ERROR]"),
        (LogLevel.DEBUG, "[DEBUG]"),
    ],
)
def test_prefixes(level, prefix):
    stream = io.StringIO()
    Logger(enabled=True, level=LogLevel.DEBUG, stream=stream).log(level, "x")
    assert stream.getvalue().startswith(prefix + " ")


def test_messages_below_level_are_dropped():
    stream = io.StringIO()
    logger = Logger(enabled=True, stream=stream)
    logger.log(LogLevel.DEBUG, "hidden")
    logger.log(LogLevel.WARNING, "shown")
    output = stream.getvalue()
    assert "hidden" not in output
    assert "shown" in output


def test_get_logger_is_shared():
    first = get_logger()
    saved = first.level
    first.level = LogLevel.ERROR
    try:
        assert get_logger().level is LogLevel.ERROR
    finally:
        first.level = saved


def test_module_functions_use_shared_logger(capsys):
    logger = get_logger()
    saved = (logger.enabled, logger.level)
    logger.enabled = True
    logger.level = LogLevel.DEBUG
    try:
        log_debug("d")
        log_info("i")
        log_warning("w")
        log_error("e")
    finally:
        logger.enabled, logger.level = saved
    lines = capsys.readouterr().err.splitlines()
    assert [line[:7] for line in lines] == ["[DEBUG]", "[INFO ]", "[WARN ]", "[ERROR]"]


def test_shared_logger_disabled_by_default_writes_nothing(capsys):
    logger = get_logger()
    saved = logger.enabled
    logger.enabled = False
    try:
        log_error("quiet")
    finally:
        logger.enabled = saved
    assert capsys.readouterr().err == ""