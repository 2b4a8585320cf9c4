#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 09:02:51
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
DB
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import os
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, scoped_session
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tirelife.config import DATABASE_URL
from tirelife.errors import PersistenceError, ValidationFailedError
from tirelife.models import Base  # models must be imported before create_all

# ========================================================
# GLOABALS
# ========================================================
log = logging.getLogger(__name__)


# ========================================================
# EVENT LISTENER
# ========================================================
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.split(".")[0] != "sqlite3":
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
    finally:
        cursor.close()


# ========================================================
# FUNCTIONS
# ========================================================
def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        os.makedirs(os.path.dirname(os.path.abspath(url[10:])), exist_ok=True)
    kwargs.setdefault("connect_args", {"check_same_thread": False}
                      if url.startswith("sqlite") else {})
    engine = create_engine(url, echo=False, future=True, **kwargs)
    if url.startswith("sqlite"):
        _sqlite_transactions(engine)
    return engine


def _sqlite_transactions(engine: Engine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself; the pysqlite driver defers it, which
    breaks SAVEPOINT (used for the optional expense of a mutation).
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


def make_session_factory(bind: Engine):
    return scoped_session(sessionmaker(bind=bind, autoflush=False,
                                       autocommit=False,
                                       expire_on_commit=False))


def init_db(bind: Engine) -> None:
    """Create all tables (idempotent)."""
    Base.metadata.create_all(bind=bind)


@contextmanager
def session_scope(session_factory):
    """
    One unit of work: commit on success, roll back on any error.

    Unexpected database errors leave as PersistenceError so callers only
    ever deal with the tire set error taxonomy.
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        log.warning("Integrity conflict, transaction rolled back: %s", e.orig)
        raise ValidationFailedError(
            "The change conflicts with existing data (e.g. a second active "
            "tire set for the vehicle).") from e
    except SQLAlchemyError as e:
        db.rollback()
        log.error("Database error, transaction rolled back", exc_info=e)
        raise PersistenceError(str(e)) from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
