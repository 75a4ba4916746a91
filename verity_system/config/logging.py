"""loguru setup for the synchronous analyzers.

Extractors, the rules engine and the logic checks log through
``get_logger(component)``. Records go to stderr in both modes; stdout
belongs to the CLI.
"""

import sys

from loguru import logger

from verity_system.config.settings import settings

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging() -> None:
    """
    (Re)configure loguru from settings.

    Interactive terminals with log_format "console" get colorized lines;
    anything else gets one JSON object per record.
    """
    logger.remove()
    # records logged without a bound component still render
    logger.configure(extra={"component": "verity"})

    if sys.stderr.isatty() and settings.log_format.lower() == "console":
        logger.add(sys.stderr, format=_CONSOLE_FORMAT, level=settings.log_level, colorize=True)
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,
            diagnose=False,
        )


def get_logger(component: str):
    """
    Logger bound to ``component``.

    Example:
        >>> log = get_logger("analyzers.compliance")
        >>> log.info("Evaluating 4 rules")
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
