"""Logging setup for applications embedding frc-section.

The library logs through loguru and disables its own logger on import.
Call :func:`configure_logging` to see the solver output.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Enable frc-section logging.

    Parameters
    ----------
    level : str
        Minimum level for the stderr sink ("DEBUG" shows per-solve
        iteration summaries).
    log_file : str or Path, optional
        If given, also write a rotating log file at DEBUG level.
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level="DEBUG",
            rotation="5 MB",
            retention=10,
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )
    logger.enable("frc_section")
