"""Test log level filtering, especially spew level."""

import tempfile
from pathlib import Path

import pytest

from conflictwatch.core.log import (
    LEVELS,
    ConsoleSink,
    FileSink,
    LogfireSink,
    level_name,
    setup_logger,
)


@pytest.fixture
def temp_log_dir():
    """Create temporary directory for log files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def log_all_levels(temp_log_dir, level):
    log_file = temp_log_dir / f"{level}.log"

    logger = setup_logger(
        log_root=temp_log_dir,
        run_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level=level, path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )

    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.error("ERROR message")
    logger.close()

    return log_file.read_text()


def test_spew_level_includes_all(temp_log_dir):
    content = log_all_levels(temp_log_dir, "spew")

    for name in ["SPEW", "TRACE", "DEBUG", "INFO", "WARN", "ERROR"]:
        assert f"{name} message" in content


def test_trace_level_filters_spew(temp_log_dir):
    content = log_all_levels(temp_log_dir, "trace")

    assert "SPEW message" not in content
    assert "TRACE message" in content
    assert "INFO message" in content


def test_info_level_filters_debug_trace_spew(temp_log_dir):
    content = log_all_levels(temp_log_dir, "info")

    assert "SPEW message" not in content
    assert "TRACE message" not in content
    assert "DEBUG message" not in content
    assert "INFO message" in content
    assert "WARN message" in content


def test_error_level_only_includes_error(temp_log_dir):
    content = log_all_levels(temp_log_dir, "error")

    assert "WARN message" not in content
    assert "ERROR message" in content


def test_sink_inherits_logger_level(temp_log_dir):
    """A sink without its own level uses the level given to the logger."""
    log_file = temp_log_dir / "inherit.log"

    logger = setup_logger(
        log_root=temp_log_dir,
        run_name="test",
        level="warn",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.close()

    content = log_file.read_text()
    assert "INFO message" not in content
    assert "WARN message" in content


def test_structured_attributes_in_file(temp_log_dir):
    log_file = temp_log_dir / "attrs.log"

    logger = setup_logger(
        log_root=temp_log_dir,
        run_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )
    logger.info("Checking {pr}", pr="#3 (feature)")
    logger.close()

    content = log_file.read_text()
    assert "Checking #3 (feature)" in content
    assert "pr='#3 (feature)'" in content


def test_default_file_path_uses_run_name(temp_log_dir):
    logger = setup_logger(
        log_root=temp_log_dir,
        run_name="pr-12",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
        logfire=LogfireSink(enabled=False),
    )
    logger.info("hello")
    logger.close()

    assert (temp_log_dir / "pr-12" / "conflictwatch.log").exists()


def test_level_ordering():
    """Test level ordering: spew < trace < debug < info."""
    order = ["spew", "trace", "debug", "info", "warn", "error", "fatal"]
    numbers = [LEVELS[name] for name in order]

    assert numbers == sorted(numbers)
    assert LEVELS['spew'] == 1  # SEVERITY_NUMBER_TRACE
    assert LEVELS['trace'] == 3  # SEVERITY_NUMBER_TRACE3
    assert LEVELS['debug'] == 5  # SEVERITY_NUMBER_DEBUG
    assert LEVELS['info'] == 9  # SEVERITY_NUMBER_INFO


def test_level_name_round_trip():
    for name, number in LEVELS.items():
        assert level_name(number) == name
