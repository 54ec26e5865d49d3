import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from homebase.config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Process-scoped engine and session factory.

    `init` and `dispose` are called from the application lifespan so that the
    engine is created once per process and torn down explicitly.
    """

    def __init__(self):
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def init(self, url: Optional[str] = None) -> Engine:
        if self.engine is not None:
            return self.engine

        url = url or settings.DATABASE_URL
        if url.startswith("sqlite"):
            # SQLite doesn't support connection pooling arguments
            self.engine = create_engine(
                url,
                connect_args={
                    "check_same_thread": False,
                    "timeout": settings.DATABASE_CONNECT_TIMEOUT,
                },
                echo=settings.DEBUG,
            )
        else:
            self.engine = create_engine(
                url,
                connect_args={
                    "connect_timeout": settings.DATABASE_CONNECT_TIMEOUT,
                    "options": f"-c statement_timeout={settings.DATABASE_STATEMENT_TIMEOUT_MS}",
                },
                pool_pre_ping=True,  # Verify connections before use
                pool_recycle=3600,
                pool_size=10,
                max_overflow=20,
                echo=settings.DEBUG,
            )

        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )
        logger.info("Database engine initialised", extra={"dialect": self.engine.dialect.name})
        return self.engine

    def create_all(self) -> None:
        from homebase.models import Base

        Base.metadata.create_all(bind=self.init())

    def session(self) -> Session:
        if self._session_factory is None:
            self.init()
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None


database = Database()


def get_db():
    """
    Database session dependency for FastAPI.
    Creates a session per request and always closes it.
    """
    db = database.session()
    try:
        yield db
    finally:
        db.close()
