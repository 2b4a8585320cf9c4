#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 13:04:22
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Cross-process write lock around tire set mutations
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import os
from filelock import FileLock, Timeout

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)


# ========================================================
# CLASSES
# ========================================================
class WriteLock:
    """
    Serializes writers across processes so the "one active tire set per
    vehicle" check and the write that follows it cannot interleave.

    Parameters
    ----------
    path : str
        Lock file; its directory is created if missing.
    timeout : float
        Seconds to wait for the lock, -1 waits forever.
    """

    def __init__(self, path: str, timeout: float = -1):
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        self.path = path
        self._lock = FileLock(path, timeout=timeout)

    def __enter__(self):
        try:
            self._lock.acquire()
        except Timeout:
            log.error("Could not acquire write lock %s", self.path)
            raise
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()
