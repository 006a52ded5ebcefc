"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from shopledger.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_TIMEOUT = 30.0


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def create_sqlite_database(
    database_path: Optional[str] = None,
    atomic_increments: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SHOPLEDGER_DB_PATH
            environment variable, then defaults to ~/.shopledger/shopledger.db
        atomic_increments: Allow atomic increment statements. If None, reads
            SHOPLEDGER_ATOMIC_INCREMENTS (enabled unless set to 0/false/no/off)
        timeout: Seconds to wait on a locked database. If None, reads
            SHOPLEDGER_DB_TIMEOUT, then defaults to 30

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("SHOPLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.shopledger/shopledger.db
        home = Path.home()
        db_dir = home / ".shopledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "shopledger.db")

    return create_database(
        f"sqlite:///{database_path}",
        atomic_increments=atomic_increments,
        timeout=timeout,
    )


def create_database(
    database_url: str,
    atomic_increments: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL.

    Args:
        database_url: SQLAlchemy database URL
        atomic_increments: See create_sqlite_database
        timeout: See create_sqlite_database

    Returns:
        SQLAlchemyDatabase instance
    """
    if atomic_increments is None:
        atomic_increments = _env_flag("SHOPLEDGER_ATOMIC_INCREMENTS", True)

    if timeout is None:
        timeout = float(os.environ.get("SHOPLEDGER_DB_TIMEOUT", DEFAULT_TIMEOUT))

    return SQLAlchemyDatabase(
        database_url, atomic_increments=atomic_increments, timeout=timeout
    )
