from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool
from functools import wraps
from typing import Generator
import logging

from trekhub.config.settings import DatabaseSettings, get_settings
from trekhub.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

# Errors that mean "the store did not answer", as opposed to a bad query
STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def build_engine(config: DatabaseSettings) -> Engine:
    """Create an engine whose calls are bounded by the configured timeouts."""
    if config.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": config.connect_timeout_seconds}}
        if config.url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases vanish per connection unless shared
            kwargs["poolclass"] = StaticPool
        return create_engine(config.url, echo=config.echo, future=True, **kwargs)

    connect_args = {"connect_timeout": config.connect_timeout_seconds}
    if config.url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={config.statement_timeout_ms}"
    return create_engine(
        config.url,
        echo=config.echo,
        pool_pre_ping=True,
        pool_timeout=config.pool_timeout_seconds,
        connect_args=connect_args,
        future=True,
    )


engine = build_engine(get_settings().database)
SessionLocal = sessionmaker(
    bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
)

# SQLAlchemy declarative base for models
Base = declarative_base()


def init_db(bind: Engine = None) -> None:
    """Create missing tables (development and tests; production uses Alembic)."""
    import trekhub.models  # noqa: F401  registers the mapped classes

    Base.metadata.create_all(bind=bind or engine)


def check_connection(session: Session) -> bool:
    session.execute(text("SELECT 1"))
    return True


def store_operation(func):
    """
    Translate store outages raised inside a service method into
    ``StoreUnavailableError``. The service must expose its session as ``self.db``.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except STORE_ERRORS as exc:
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_exc:
                # The connection is gone; the session is discarded with the request
                logger.warning(
                    f"Rollback after failed {func.__qualname__} also failed: {type(rollback_exc).__name__}",
                    extra={"operation": func.__qualname__},
                )
            logger.error(
                f"Store call {func.__qualname__} failed: {type(exc).__name__}",
                extra={"operation": func.__qualname__},
            )
            raise StoreUnavailableError(details={"operation": func.__name__}) from exc

    return wrapper


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
