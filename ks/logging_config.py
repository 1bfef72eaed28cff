"""Logging configuration for ks."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure loguru with appropriate level.

    Full-screen sessions pass ``log_file`` so log lines never land on the
    terminal the UI is drawing on.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    if log_file is None:
        logger.add(sys.stderr, level=level, format="{level.icon} {message}")
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(log_file, level=level, rotation="1 MB", retention=3)
