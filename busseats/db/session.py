from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from busseats.config import settings
from busseats.db.base import Base


DATABASE_URL = str(settings.DATABASE_URL)

# create async engine
engine = create_async_engine(DATABASE_URL, echo=settings.DEBUG)

# session factory
async_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:  # to be used as dependency
    async with async_session() as session:
        yield session


async def create_tables():
    # import models so they register on Base.metadata
    import busseats.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
