# qcomm/logging_config.py
from __future__ import annotations

import logging
from typing import Optional

from qcomm.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging once and return the package logger."""
    name = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)
    return logging.getLogger("qcomm")
