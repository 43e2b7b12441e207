from __future__ import annotations

import logging

from bulksig.core.settings import get_settings

_ROOT_LOGGER = "bulksig"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger for ``name``, applying the configured level to the
    package root logger the first time it is set up.
    """
    root = logging.getLogger(_ROOT_LOGGER)
    if root.level == logging.NOTSET:
        root.setLevel(get_settings().log_level)
    return logging.getLogger(name)
