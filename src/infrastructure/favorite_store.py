import logging
from typing import FrozenSet, Iterable

from sqlalchemy import create_engine, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy import Table, Column, String, JSON, DateTime, MetaData, text
from sqlalchemy.exc import SQLAlchemyError

from src.domain.exceptions import FavoriteStoreException

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"

# SQLAlchemy core Table definition
metadata = MetaData()
preferences_table = Table(
    'preferences', metadata,
    Column('key', String, primary_key=True),
    Column('value', JSON, nullable=False),
    Column('updated_at', DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP')),
)

class SqlFavoriteStore:
    """
    Persists the favorite set as a single row of a local SQLite key-value table.
    Reads and writes are synchronous; the whole set is stored under FAVORITES_KEY.
    """

    def __init__(self, db_url: str):
        try:
            self.engine = create_engine(db_url, echo=False)
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise FavoriteStoreException(f"Could not initialise favorite store: {e}") from e

    def load(self) -> FrozenSet[str]:
        """
        Reads the stored favorite set.

        Returns:
            FrozenSet[str]: Stored project names, empty when nothing was saved yet.
        """
        stmt = select(preferences_table.c.value).where(preferences_table.c.key == FAVORITES_KEY)
        try:
            with self.engine.connect() as conn:
                value = conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise FavoriteStoreException(f"Could not load favorites: {e}") from e

        if value is None:
            return frozenset()
        if not isinstance(value, list):
            logger.warning(f"Ignoring malformed favorites entry of type {type(value).__name__}.")
            return frozenset()
        return frozenset(str(name) for name in value)

    def save(self, favorites: Iterable[str]) -> None:
        """
        Overwrites the stored favorite set.

        Args:
            favorites (Iterable[str]): The complete set of favorite project names.
        """
        # Sorted so the stored row is stable for identical sets.
        value = sorted(set(favorites))

        stmt = insert(preferences_table).values(key=FAVORITES_KEY, value=value)
        upsert_stmt = stmt.on_conflict_do_update(
            index_elements=['key'],
            set_={
                'value': stmt.excluded.value,
                'updated_at': text('CURRENT_TIMESTAMP'),
            },
        )

        try:
            with self.engine.begin() as conn:
                conn.execute(upsert_stmt)
        except SQLAlchemyError as e:
            raise FavoriteStoreException(f"Could not save favorites: {e}") from e
