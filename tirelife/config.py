#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 08:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
App Configurations
"""
# ========================================================
# IMPORTS
# ========================================================
import os
from pathlib import Path

# ========================================================
# GLOABALS
# ========================================================
VERSION = "2.0.0"
APP_NAME = "Brandherm - Reifenlebenslauf"

BASE_DIR = Path(__file__).resolve().parents[1]
DB_PATH = os.environ.get("TIRELIFE_DB_PATH",
                         str(BASE_DIR / "db/tire_lifecycle.db"))
DATABASE_URL = os.environ.get("TIRELIFE_DATABASE_URL", f"sqlite:///{DB_PATH}")
LOCK_PATH = os.environ.get("TIRELIFE_LOCK_PATH", DB_PATH + ".lock")

# Set Production via ENV!
SECRET_KEY = os.environ.get("TIRELIFE_SECRET_KEY", "change-me-please")
HOST = "0.0.0.0"
PORT = int(os.environ.get("TIRELIFE_PORT", "5000"))
LOG_LEVEL = os.environ.get("TIRELIFE_LOG_LEVEL", "INFO")

# --------------------------------------------------------
# Warning thresholds (used when a tire set has none)
# --------------------------------------------------------
DEFAULT_MILEAGE_WARRANTY_KM = int(
    os.environ.get("TIRELIFE_MILEAGE_WARRANTY_KM", "80000"))
DEFAULT_AGE_LIMIT_YEARS = int(os.environ.get("TIRELIFE_AGE_LIMIT_YEARS", "10"))
DEFAULT_TREAD_LIMIT_MM = float(
    os.environ.get("TIRELIFE_TREAD_LIMIT_MM", "2.0"))

# fraction of a limit at which the *_WARNING flag is raised
WARNING_RATIO = float(os.environ.get("TIRELIFE_WARNING_RATIO", "0.7"))
# tread is inverted: warning at limit * multiplier
TREAD_WARNING_MULTIPLIER = float(
    os.environ.get("TIRELIFE_TREAD_WARNING_MULTIPLIER", "1.3"))
TREAD_STALE_MONTHS = int(os.environ.get("TIRELIFE_TREAD_STALE_MONTHS", "12"))
STORAGE_LONG_MONTHS = int(
    os.environ.get("TIRELIFE_STORAGE_LONG_MONTHS", "12"))

# --------------------------------------------------------
# Warning flags job
# --------------------------------------------------------
FLAG_JOB_INTERVAL_HOURS = float(
    os.environ.get("TIRELIFE_FLAG_JOB_INTERVAL_HOURS", "24"))
FLAG_JOB_BATCH_SIZE = int(
    os.environ.get("TIRELIFE_FLAG_JOB_BATCH_SIZE", "100"))
FLAG_JOB_MAX_REPORTED_ERRORS = 20

# --------------------------------------------------------
# Expense kinds used for tire operations
# --------------------------------------------------------
EXPENSE_KIND_TIRE_REPLACEMENT = 213
EXPENSE_KIND_SEASONAL_TIRE_SERVICE = 22
DEFAULT_CURRENCY = "USD"
