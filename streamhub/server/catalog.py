# Copyright (c) 2025 Trae AI. All rights reserved.

import time
import logging
import threading
from typing import Callable, Dict, List, Optional
from streamhub.core.models import Category, MediaItem
from streamhub.services.library_service import LibraryService

logger = logging.getLogger(__name__)


class CatalogCache:
    """
    Keeps the last computed item list of each category.
    Entries are replaced wholesale on refresh, never mutated.
    """

    def __init__(self, library: LibraryService):
        self.library = library
        self._items: Dict[Category, List[MediaItem]] = {}
        self._refreshed_at: Dict[Category, float] = {}
        self._lock = threading.Lock()

    def get(self, category) -> List[MediaItem]:
        category = Category.parse(category)
        with self._lock:
            cached = self._items.get(category)
        if cached is not None:
            return cached
        return self._load(category)

    def _load(self, category: Category) -> List[MediaItem]:
        items = self.library.get_category_items(category)
        with self._lock:
            self._items[category] = items
            self._refreshed_at[category] = time.time()
        return items

    def categories(self) -> List[Category]:
        return self.library.available_categories()

    def all_items(self) -> List[MediaItem]:
        items = []
        for category in self.categories():
            items.extend(self.get(category))
        return items

    def refresh(self, progress: Optional[Callable[[int, str], None]] = None) -> int:
        """
        Recomputes every available category. Returns the number of top-level items.
        """
        categories = self.categories()
        total = 0
        for index, category in enumerate(categories):
            if progress:
                progress(int(index * 100 / len(categories)), f"Refreshing {category.value}...")
            total += len(self._load(category))
        with self._lock:
            for stale in set(self._items) - set(categories):
                del self._items[stale]
                self._refreshed_at.pop(stale, None)
        logger.info(f"Catalog refreshed: {total} items in {len(categories)} categories")
        return total

    def invalidate(self, changes: Optional[List[str]] = None):
        with self._lock:
            self._items.clear()
            self._refreshed_at.clear()
        if changes:
            logger.info(f"Catalog invalidated after {len(changes)} file changes")

    def status(self) -> Dict[str, float]:
        with self._lock:
            return {category.value: refreshed for category, refreshed in self._refreshed_at.items()}
