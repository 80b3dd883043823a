import contextlib
import sys
from collections.abc import AsyncIterator

from pydantic.networks import PostgresDsn
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from wedding_portal.config.settings import settings


def create_engine(url: str | PostgresDsn):
    url = str(url)
    engine_kwargs = {}
    if "sqlite" in url:
        # aiosqlite connections are bound to the loop that opened them
        engine_kwargs = {"connect_args": {"timeout": 15}, "poolclass": NullPool}
    return create_async_engine(
        url,
        echo=settings.log_db,
        future=True,  # use the sqlalchemy 2.0 classes
        **engine_kwargs,
    )


def generate_test_db_dsn(dsn: str | PostgresDsn) -> str:
    part_dsn, db_name = str(dsn).rsplit("/", 1)
    return f"{part_dsn}/test_{db_name}"


if "pytest" in sys.modules:
    engine = create_engine(generate_test_db_dsn(settings.database_url))
else:
    engine = create_engine(settings.database_url)


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
