# @TASK S0-T0.3 - SQLAlchemy 2.x async 엔진 및 세션 팩토리

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from linkstash.config import get_settings

settings = get_settings()

# Unified search holds two sessions per request (notes and links).
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.DATABASE_ECHO,
    pool_size=settings.DATABASE_POOL_SIZE,
    pool_pre_ping=True,
)

# Search only reads; sessions are short-lived and never committed.
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for the notes and note_links tables."""
