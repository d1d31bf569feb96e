"""
Logging setup for revo runs.

Engine messages open with a ``[Component]`` tag (``[Evolution]``,
``[Refinement]``, ``[WorkerPool]`` ...). The tag is lifted into
``record["extra"]["component"]`` so both sinks print it as its own column
and the console can be narrowed to a few components.
"""

from datetime import datetime, timezone
import os
import re
import sys
from typing import Iterable

from loguru import logger

DEFAULT_COMPONENT = "revo"

_TAG = re.compile(r"^\[(?P<component>[A-Za-z_][\w.]*)\]\s*")

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]: <12} | {message}"
_COLOR_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]: <12}</cyan> | "
    "<level>{message}</level>"
)


def tag_component(record) -> None:
    """Move a leading ``[Component]`` tag from the message into ``extra``."""
    if "component" in record["extra"]:
        return
    match = _TAG.match(record["message"])
    if match is None:
        record["extra"]["component"] = DEFAULT_COMPONENT
        return
    record["extra"]["component"] = match.group("component")
    record["message"] = record["message"][match.end():]


def _console_filter(components: Iterable[str] | None):
    if components is None:
        return None
    allowed = set(components)
    # Warnings and errors always reach the console.
    return lambda record: record["extra"]["component"] in allowed or record["level"].no >= 30


def setup_logger(
    log_dir: str = "logs",
    level: str = "INFO",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
    components: Iterable[str] | None = None,
) -> str:
    """
    Set up tagged console and file logging.

    Args:
        log_dir: Directory for log files
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation: Log rotation policy (e.g., "50 MB", "1 day")
        retention: Log retention policy (e.g., "30 days", "1 month")
        enable_colors: Whether to enable colored console output
        components: Components shown on the console; ``None`` shows all.
            The file sink always receives every component.

    Returns:
        Path to the log file
    """
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"revo_{timestamp}.log")

    logger.remove()
    logger.configure(patcher=tag_component)

    colorize = enable_colors and sys.stdout.isatty()
    logger.add(
        lambda msg: print(msg, end=""),
        level=level,
        format=_COLOR_FORMAT if colorize else _PLAIN_FORMAT,
        filter=_console_filter(components),
        colorize=colorize,
        backtrace=True,
        diagnose=True,
    )
    logger.add(
        log_file,
        level=level,
        format=_PLAIN_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=True,
    )

    logger.info("[Logging] Writing to console and {}", log_file)
    return log_file
