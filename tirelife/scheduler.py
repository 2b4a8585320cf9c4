#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 13:09:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Background timer for periodic jobs (warning flag recomputation)
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import threading

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)


# ========================================================
# CLASSES
# ========================================================
class RepeatedTimer:
    """
    Runs a given function repeatedly every interval_seconds in a background
    thread. A failing run is logged and the next one still happens.
    """

    def __init__(self, interval_seconds: float, function, *,
                 run_immediately=False, name=None):
        self.interval = interval_seconds
        self.function = function
        self.name = name or getattr(function, "__name__", "job")
        self.thread = threading.Thread(target=self._run, daemon=True,
                                       name=f"timer-{self.name}")
        self._stop = threading.Event()
        self.run_immediately = run_immediately

    def start(self):
        """Start the background thread."""
        log.info("Scheduling %s every %.0f s", self.name, self.interval)
        self.thread.start()

    def stop(self):
        """Stop the background thread."""
        self._stop.set()
        if self.thread.is_alive():
            self.thread.join(timeout=1)

    def _call(self):
        try:
            self.function()
        except Exception:
            log.exception("Scheduled job %s failed", self.name)

    def _run(self):
        """Internal loop to run the function repeatedly."""
        if self.run_immediately:
            self._call()

        while not self._stop.wait(self.interval):
            self._call()
