"""Database package: Database (engine + session factory), init(), session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from orderdesk.db.base import Base

# Import all models so Base.metadata has all tables
from orderdesk.db.models import Dealer, Inquiry, Order, OrderItem, Product  # noqa: F401
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.db")


def _create_engine(url: str) -> Engine:
    """Create engine; SQLite gets check_same_thread=False for use from executor threads."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False)
    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees its own empty in-memory DB
        return create_engine(url, echo=False, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, echo=False, connect_args=connect_args)


class Database:
    """Owns the engine and session factory. Created by the composition root (CLI, API, tests)."""

    def __init__(self, url: str):
        self.url = url
        self._init_lock = threading.Lock()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        self.init()
        return self._engine

    def init(self, seed: bool = True) -> None:
        """Create engine and tables; seed products from CSV when the products table is empty."""
        with self._init_lock:
            if self._session_factory is not None:
                return
            self._engine = _create_engine(self.url)
            Base.metadata.create_all(bind=self._engine)
            self._session_factory = sessionmaker(bind=self._engine, autocommit=False, autoflush=False)
        if seed:
            with self.session() as session:
                count = session.scalar(select(func.count(Product.id)))
                if not count:
                    from orderdesk.db.seed_data import seed_products

                    seed_products(session)
        logger.debug("db.initialized", url=self.url.split("@")[-1])

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager yielding a DB session. Commits on success, rolls back on error."""
        if self._session_factory is None:
            self.init()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
