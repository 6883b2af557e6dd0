#!/usr/bin/env python3
"""
Per-step logging

Console output is configured once for the process. Each step additionally
gets its own log file, attached to the step's package logger, so running
several steps in one process (workflow.py) still writes one file per step.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(log_level: str = 'INFO', log_dir: Optional[Path] = None,
                 log_name: str = 'step1_recipes') -> logging.Logger:
    """
    Setup console logging and a step log file

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (defaults to 'logs/')
        log_name: Step package name; also the log file name without extension

    Returns:
        The step's package logger
    """
    level = getattr(logging, log_level.upper())
    log_dir = Path(log_dir) if log_dir else Path('logs')
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (log_dir / f'{log_name}.log').resolve()

    # No-op when the root logger already has handlers (e.g. workflow.setup_logging)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])

    step_logger = logging.getLogger(log_name)
    step_logger.setLevel(level)

    already_attached = any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file
        for h in step_logger.handlers
    )
    if not already_attached:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        step_logger.addHandler(file_handler)

    return step_logger
