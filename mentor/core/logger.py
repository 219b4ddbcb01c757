"""Logger configuration for the mentor backend.

One loguru setup for the API server and the CLI. The plan engine logs its
inputs and hashes at DEBUG; module_levels lets that detail be switched on
for mentor.plans (or any other package) without making the whole service
verbose.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def module_filter(level: str, module_levels: dict[str, str] | None) -> tuple[str, dict[str, str] | None]:
    """Build the sink level and loguru per-module filter.

    Loguru checks the sink level before the filter, so the sink has to accept
    the most verbose level any module asks for.

    Returns:
        (sink level, filter dict or None when no module overrides are set)
    """
    if not module_levels:
        return level, None
    levels = {"": level.upper(), **{module: lvl.upper() for module, lvl in module_levels.items()}}
    lowest = min(levels.values(), key=lambda name: logger.level(name).no)
    return lowest, levels


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    module_levels: dict[str, str] | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru logger with console and optional file output.

    Args:
        level: Default logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
        module_levels: Per-module overrides, e.g. {"mentor.plans": "DEBUG"}
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    logger.remove()
    sink_level, filters = module_filter(level, module_levels)

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=sink_level,
        filter=filters,
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=sink_level,
            filter=filters,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=True,
        )

    logger.info(f"Logger initialized with level={level}, module_levels={module_levels or {}}")
