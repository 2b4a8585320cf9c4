#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 09:10:26
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Typed failures of tire set operations.
"""
# ========================================================
# IMPORTS
# ========================================================
from typing import Optional


# ========================================================
# GLOABALS
# ========================================================
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
VALIDATION_FAILED = "VALIDATION_FAILED"
EXCEPTION = "EXCEPTION"


# ========================================================
# CLASSES
# ========================================================
class TireSetError(Exception):
    """Base class; ``code`` tells the caller which branch to take."""
    code = EXCEPTION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message,
                "field": self.field}


class NotFoundError(TireSetError):
    code = NOT_FOUND


class ForbiddenError(TireSetError):
    code = FORBIDDEN


class ValidationFailedError(TireSetError):
    code = VALIDATION_FAILED


class PersistenceError(TireSetError):
    code = EXCEPTION
