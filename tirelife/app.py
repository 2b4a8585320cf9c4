#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 15:10:04
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Flask App Factory
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from flask import Flask, jsonify
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.config import APP_NAME, SECRET_KEY, VERSION
from tirelife.errors import (
    EXCEPTION, FORBIDDEN, NOT_FOUND, VALIDATION_FAILED, TireSetError
)

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)

HTTP_STATUS = {
    NOT_FOUND: 404,
    FORBIDDEN: 403,
    VALIDATION_FAILED: 400,
    EXCEPTION: 500,
}


# ========================================================
# FUNCTIONS
# ========================================================
def create_app(controller=None):
    """
    Build the JSON API around a TireSetController.

    Without a controller one is created on the configured database.
    """
    app = Flask(__name__)
    app.secret_key = SECRET_KEY
    app.config["APP_NAME"] = APP_NAME
    app.config["APP_VERSION"] = VERSION

    if controller is None:
        from tirelife.controller import TireSetController
        from tirelife.db import init_db, make_engine, make_session_factory
        engine = make_engine()
        init_db(engine)
        controller = TireSetController(make_session_factory(engine))
    app.extensions["tirelife"] = controller

    @app.errorhandler(TireSetError)
    def handle_tire_set_error(e: TireSetError):
        status = HTTP_STATUS.get(e.code, 500)
        if status >= 500:
            log.error("Request failed: %s", e.message)
        return jsonify(e.to_dict()), status

    # Register routes
    from tirelife.routes import register_routes
    register_routes(app)

    return app
