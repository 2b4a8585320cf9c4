#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 15:40:51
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Entry point
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.app import create_app
from tirelife.config import (
    APP_NAME, FLAG_JOB_INTERVAL_HOURS, HOST, LOCK_PATH, PORT, VERSION
)
from tirelife.controller import TireSetController
from tirelife.db import init_db, make_engine, make_session_factory
from tirelife.log import setup_logging
from tirelife.scheduler import RepeatedTimer


# ========================================================
# MAIN
# ========================================================
if __name__ == "__main__":
    setup_logging()
    log = logging.getLogger("tirelife.run")

    engine = make_engine()
    init_db(engine)
    controller = TireSetController(make_session_factory(engine), LOCK_PATH)
    app = create_app(controller)

    # Start the warning flags thread once
    flag_timer = RepeatedTimer(FLAG_JOB_INTERVAL_HOURS * 3600,
                               controller.compute_warning_flags,
                               run_immediately=True, name="warning-flags")
    flag_timer.start()

    log.info("%s v%s running on http://%s:%s", APP_NAME, VERSION, HOST, PORT)
    try:
        app.run(host=HOST, port=PORT, debug=False)
    finally:
        flag_timer.stop()
