import os
from typing import AsyncGenerator

from scholarcast.config import settings
from scholarcast.utils.time import utcnow

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    JSON,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

DATABASE_URL = settings.database_url

# Create async engine
engine = create_async_engine(DATABASE_URL, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class ModuleIllustration(Base):
    """A generated illustration for a course module, keyed by request checksum."""

    __tablename__ = "module_illustrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(String(100), nullable=False, index=True)
    locale = Column(String(10), nullable=False)
    style = Column(String(30), nullable=False)
    visual_style = Column(String(30), nullable=False)
    provider = Column(String(50), nullable=True)
    model = Column(String(200), nullable=True)
    prompt_summary = Column(Text, nullable=True)  # First 1000 chars of the prompt
    mime_type = Column(String(50), nullable=False)
    image_data = Column(LargeBinary, nullable=False)
    slot_id = Column(String(36), nullable=True)
    anchor = Column(JSON, nullable=True)
    checksum = Column(String(64), nullable=True)
    metadata_json = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index(
            "ix_module_illustrations_identity",
            "module_id",
            "locale",
            "style",
            "visual_style",
            "checksum",
        ),
    )

    def __repr__(self):
        return (
            f"<ModuleIllustration(module_id='{self.module_id}', style='{self.style}', "
            f"visual_style='{self.visual_style}', checksum='{self.checksum}')>"
        )


def _ensure_sqlite_dir(url: str) -> None:
    """Create the directory of a file-based SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        directory = os.path.dirname(os.path.abspath(parsed.database))
        os.makedirs(directory, exist_ok=True)


async def init_db():
    """Initialize the database, creating all tables if they don't exist."""
    _ensure_sqlite_dir(DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
