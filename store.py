import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select
from db import Database
from models import ShortURL

logger = logging.getLogger("url_shortener.store")


class StorageError(Exception):
    pass


class MappingStore:
    def __init__(self, database: Database):
        self.database = database

    async def create(self, original_url: str, short_code: int) -> ShortURL:
        entry = ShortURL(original_url=original_url, short_code=short_code)
        try:
            async with self.database.session_factory() as session:
                session.add(entry)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(f"Failed to store short_code={short_code}: {exc}")
            raise StorageError(str(exc)) from exc
        return entry

    async def find_by_code(self, short_code: int) -> Optional[ShortURL]:
        # duplicates resolve to the earliest inserted row
        query = (
            select(ShortURL)
            .where(ShortURL.short_code == short_code)
            .order_by(ShortURL.id)
            .limit(1)
        )
        try:
            async with self.database.session_factory() as session:
                result = await session.execute(query)
                return result.scalar()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(f"Failed to look up short_code={short_code}: {exc}")
            raise StorageError(str(exc)) from exc
