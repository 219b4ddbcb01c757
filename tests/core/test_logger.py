"""Tests for loguru setup with per-module levels."""

import pytest
from loguru import logger

from mentor.core.logger import module_filter, setup_logger
from mentor.plans.preview import generate_deterministic_preview


@pytest.fixture
def reset_logger():
    yield
    logger.remove()


def test_module_filter_without_overrides():
    """Test no overrides keeps a plain sink level."""
    assert module_filter("INFO", None) == ("INFO", None)


def test_module_filter_lowers_sink_level():
    """Test the sink accepts the most verbose module level."""
    level, filters = module_filter("WARNING", {"mentor.plans": "debug"})

    assert level == "DEBUG"
    assert filters == {"": "WARNING", "mentor.plans": "DEBUG"}


def test_plan_engine_debug_with_quiet_default(capsys, reset_logger):
    """Test mentor.plans debug logs pass while other modules stay at WARNING."""
    setup_logger(level="WARNING", module_levels={"mentor.plans": "DEBUG"})

    generate_deterministic_preview("log-user", None)
    logger.info("outside the plan engine")

    err = capsys.readouterr().err
    assert "Generated preview for user_id=log-user" in err
    assert "outside the plan engine" not in err
    assert "Logger initialized" not in err
