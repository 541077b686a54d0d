import logging
from typing import FrozenSet

from src.infrastructure.favorite_store import SqlFavoriteStore

logger = logging.getLogger(__name__)


class FavoriteService:
    """
    Keeps the user's favorite set in memory and writes it through to the store.

    The set is read once at construction; every toggle overwrites the stored set in full.
    """

    def __init__(self, store: SqlFavoriteStore):
        self.store = store
        self._favorites: FrozenSet[str] = frozenset(store.load())
        logger.debug(f"Loaded {len(self._favorites)} favorites.")

    @property
    def favorites(self) -> FrozenSet[str]:
        return self._favorites

    def is_favorite(self, name: str) -> bool:
        return name in self._favorites

    def toggle(self, name: str) -> FrozenSet[str]:
        """
        Flips the membership of `name` and persists the resulting set.

        Args:
            name (str): Project name to add or remove.

        Returns:
            FrozenSet[str]: The updated favorite set.
        """
        if name in self._favorites:
            updated = self._favorites - {name}
            logger.info(f"Removed '{name}' from favorites.")
        else:
            updated = self._favorites | {name}
            logger.info(f"Added '{name}' to favorites.")

        self.store.save(updated)
        self._favorites = updated
        return updated
