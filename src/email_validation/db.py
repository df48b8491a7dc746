from typing import Any, Optional, cast

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from .config import Settings

# Database engine and session factory, registered at startup by the caller
engine: Optional[Any] = None
AsyncDbSessionFactory: Any = None


def build_database_url(settings: Settings) -> str:
    # Allow a full DATABASE URL override (useful for tests)
    if settings.database_url:
        return settings.database_url
    return f"postgresql+asyncpg://{settings.db_user}:{settings.db_password}@{settings.db_host}:{settings.db_port}/{settings.db_name}"


def create_engine(settings: Settings) -> Any:
    """Create and return an async engine for the given settings and register it
    on the module so other modules (or tests) can rebind or inspect it.

    Pool options only apply to server databases; SQLite picks its own pool class.
    """
    global engine
    database_url = build_database_url(settings)

    kwargs: dict[str, Any] = {"echo": False, "future": True}
    if not database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=settings.db_pool_pre_ping,
        )
    if "postgresql" in database_url:
        kwargs["connect_args"] = {"command_timeout": 30}

    engine = create_async_engine(database_url, **kwargs)
    return engine


def create_sessionmaker(bind_engine: Any) -> Any:
    """Create and register a SQLAlchemy AsyncSession factory bound to the provided engine."""
    global AsyncDbSessionFactory
    AsyncDbSessionFactory = cast(
        Any, sessionmaker(bind=bind_engine, expire_on_commit=False, class_=AsyncSession)
    )  # type: ignore[call-overload]
    return AsyncDbSessionFactory


async def get_db():
    """Yield a database session from the registered session factory."""
    # Resolve the module-level factory at call time so tests that rebind it are respected.
    if AsyncDbSessionFactory is None:
        raise RuntimeError(
            "Database session factory not initialized. Call create_engine()/create_sessionmaker() first."
        )
    async with AsyncDbSessionFactory() as db_session:
        yield db_session
