"""Logging configuration for mvpb commands."""

import logging

_LOGGER_NAME = "mvpb"


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the mvpb logger hierarchy with a single stderr handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked repeatedly.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[mvpb] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger
