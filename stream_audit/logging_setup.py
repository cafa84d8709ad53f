"""Logging configuration for the stream-audit crawler."""

import logging

import colorlog

log = logging.getLogger("stream-audit")

_LOG_COLORS = {
    "DEBUG":    "cyan",
    "INFO":     "green",
    "WARNING":  "yellow",
    "ERROR":    "red",
    "CRITICAL": "bold_red",
}

# Verbose runs show where a message came from (retry, crawler, sink …)
_FORMAT = "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(message)s"
_DEBUG_FORMAT = (
    "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s "
    "%(blue)s%(module)s:%(lineno)d%(reset)s %(message)s"
)


def _setup_logging(debug: bool = False) -> None:
    """
    Attach a single colored console handler to the ``stream-audit`` logger.

    Args:
        debug: Log at DEBUG level and prefix each line with its source module.
    """
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.handlers.clear()

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        _DEBUG_FORMAT if debug else _FORMAT,
        datefmt="%H:%M:%S",
        log_colors=_LOG_COLORS,
    ))
    log.addHandler(handler)
