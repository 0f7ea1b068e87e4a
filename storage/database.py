"""
Storage - Database.

============================================================
RESPONSIBILITY
============================================================
Manages the engine and sessions for the record store.

- Engine built from DatabaseConfig
- Explicit transaction boundaries via session_scope()
- Hard failures on persistence errors

============================================================
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import DatabaseConfig
from storage.models import Base


logger = logging.getLogger(__name__)


class DatabasePersistenceError(Exception):
    """Raised when database persistence fails."""
    pass


class DatabaseConnectionError(DatabasePersistenceError):
    """Raised when database connection fails."""
    pass


class DatabaseInitializationError(DatabasePersistenceError):
    """Raised when database initialization fails."""
    pass


REQUIRED_TABLES = ("move_resources",)


class Database:
    """
    Engine and session factory for one database.

    Usage:
        db = Database(DatabaseConfig(url="postgresql://..."))
        db.create_tables()
        with db.session_scope() as session:
            MoveResourceRepository(session).insert_many(records)
    """

    def __init__(self, config: Optional[DatabaseConfig] = None) -> None:
        self._config = config or DatabaseConfig.from_env()
        self._engine = self._create_engine(self._config)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @staticmethod
    def _create_engine(config: DatabaseConfig) -> Engine:
        """
        Raises:
            DatabaseConnectionError: unparseable URL, unknown dialect or
                missing DBAPI driver
        """
        logger.info(f"Creating database engine for: {config.safe_url()}")
        try:
            return Database._build_engine(config)
        except (SQLAlchemyError, ImportError) as e:
            logger.error(f"Cannot create database engine: {e}")
            raise DatabaseConnectionError(f"Cannot create engine for {config.safe_url()}: {e}") from e

    @staticmethod
    def _build_engine(config: DatabaseConfig) -> Engine:
        if config.url.startswith("sqlite"):
            # In-memory SQLite must share one connection across sessions
            kwargs = {"connect_args": {"check_same_thread": False}}
            if config.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            return create_engine(config.url, echo=config.echo, **kwargs)

        return create_engine(
            config.url,
            pool_size=config.pool_size,
            max_overflow=config.pool_size * 2,
            pool_pre_ping=True,
            echo=config.echo,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    def session(self) -> Session:
        """
        Get a new session.

        Caller is responsible for committing/closing; prefer session_scope().
        """
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Transaction boundary: commits on success, rolls back on ANY exception.

        Repository exceptions propagate unchanged; raw SQLAlchemy errors
        are wrapped in DatabasePersistenceError.
        """
        session = self.session()
        try:
            yield session
            session.commit()
            logger.debug("Database transaction committed successfully")
        except SQLAlchemyError as e:
            logger.error(f"Database transaction failed, rolling back: {e}")
            session.rollback()
            raise DatabasePersistenceError(f"Transaction failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def verify_connection(self) -> bool:
        """
        Raises:
            DatabaseConnectionError: if the database cannot be reached
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection verified successfully")
            return True
        except OperationalError as e:
            logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError(f"Cannot connect to database: {e}") from e

    def create_tables(self) -> None:
        """
        Create all tables registered on Base that do not exist yet.

        Raises:
            DatabaseInitializationError: if table creation fails
        """
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise DatabaseInitializationError(f"Table creation failed: {e}") from e

        missing = set(REQUIRED_TABLES) - set(inspect(self._engine).get_table_names())
        if missing:
            raise DatabaseInitializationError(f"Missing tables after create_all: {sorted(missing)}")
        logger.info("Database tables ready")

    def dispose(self) -> None:
        self._engine.dispose()
