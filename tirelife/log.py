#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 08:20:03
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Logging setup
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import sys
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.config import LOG_LEVEL


# ========================================================
# FUNCTIONS
# ========================================================
def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Configure the package logger once and return it."""
    logger = logging.getLogger("tirelife")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger
