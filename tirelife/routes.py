#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 15:22:37
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
All routes attached to app
"""
# ========================================================
# IMPORTS
# ========================================================
from flask import current_app, jsonify, request
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.entities import RequestContext, UserRole
from tirelife.errors import ForbiddenError, ValidationFailedError

# ========================================================
# GLOABALS
# ========================================================
TRUE_VALUES = ("1", "true", "yes", "on")


# ========================================================
# FUNCTIONS
# ========================================================
def controller():
    return current_app.extensions["tirelife"]


def request_context() -> RequestContext:
    """Caller identity as set by the authenticating proxy."""
    try:
        account_id = int(request.headers["X-Account-Id"])
        user_id = int(request.headers["X-User-Id"])
    except (KeyError, ValueError):
        raise ForbiddenError("Missing or invalid caller identity") from None
    try:
        role = UserRole(request.headers.get("X-User-Role",
                                            UserRole.OWNER.value).lower())
    except ValueError:
        raise ForbiddenError("Unknown user role") from None
    return RequestContext(account_id=account_id, user_id=user_id, role=role)


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationFailedError("Request body must be a JSON object")
    return body


def _int_arg(name):
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationFailedError(f"{name} must be an integer",
                                    name) from None


def list_filters() -> dict:
    filters = {
        "vehicle_id": _int_arg("vehicle_id"),
        "tire_type": request.args.get("tire_type"),
        "search": request.args.get("search"),
        "warning_flags": _int_arg("warning_flags"),
    }
    statuses = request.args.getlist("status")
    if len(statuses) == 1:
        filters["status"] = statuses[0]
    elif statuses:
        filters["status"] = statuses
    has_warnings = request.args.get("has_warnings")
    if has_warnings is not None:
        filters["has_warnings"] = has_warnings.lower() in TRUE_VALUES
    return filters


def _ids(body) -> list:
    ids = body.get("ids")
    if not isinstance(ids, list):
        raise ValidationFailedError("ids must be a list", "ids")
    return ids


# --------------------------------------------------------
# Routes
# --------------------------------------------------------
def register_routes(app):
    @app.route("/tire-sets", methods=["GET"])
    def list_tire_sets():
        ctx = request_context()
        return jsonify(controller().list_sets(ctx, list_filters()))

    @app.route("/tire-sets/<int:set_id>", methods=["GET"])
    def get_tire_set(set_id):
        return jsonify(controller().get(request_context(), set_id))

    @app.route("/tire-sets/get-many", methods=["POST"])
    def get_many_tire_sets():
        ctx = request_context()
        return jsonify(controller().get_many(ctx, _ids(json_body())))

    @app.route("/tire-sets", methods=["POST"])
    def create_tire_set():
        ctx = request_context()
        return jsonify(controller().create(ctx, json_body())), 201

    @app.route("/tire-sets/<int:set_id>", methods=["PUT"])
    def update_tire_set(set_id):
        ctx = request_context()
        return jsonify(controller().update(ctx, set_id, json_body()))

    @app.route("/tire-sets/<int:set_id>", methods=["DELETE"])
    def remove_tire_set(set_id):
        return jsonify(controller().remove(request_context(), set_id))

    @app.route("/tire-sets/remove-many", methods=["POST"])
    def remove_many_tire_sets():
        ctx = request_context()
        return jsonify(controller().remove_many(ctx, _ids(json_body())))

    @app.route("/tire-sets/swap", methods=["POST"])
    def swap_tire_sets():
        ctx = request_context()
        body = json_body()
        for name in ("vehicle_id", "install_tire_set_id"):
            if body.get(name) is None:
                raise ValidationFailedError(f"{name} is required", name)
        result = controller().swap(
            ctx, body["vehicle_id"], body["install_tire_set_id"],
            odometer=body.get("odometer"),
            storage_location=body.get("storage_location"),
            create_expense=bool(body.get("create_expense")),
            expense_details=body.get("expense_details"),
        )
        return jsonify(result)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok",
                        "version": current_app.config["APP_VERSION"]})
