# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import logging
from pathlib import PurePath
from typing import Dict, Iterable, Iterator, List, Optional
from streamhub.core.models import Category, GroupItem, MediaItem, MediaKind
from streamhub.core.normalizer import extract_genre, extract_year, format_title, strip_diacritics
from streamhub.core.identity import generate_id
from streamhub.core.grouping import group_media_items
from streamhub.core.matcher import MAX_SEARCH_RESULTS, filter_by_query
from streamhub.core.sorter import sort_items
from streamhub.infrastructure.listing import ListingError

logger = logging.getLogger(__name__)


def _directory_key(name: str) -> str:
    return strip_diacritics(name).casefold()


def flatten(items: Iterable[MediaItem]) -> Iterator[MediaItem]:
    """
    Yields playable items: groups are replaced by their episodes.
    """
    for item in items:
        if isinstance(item, GroupItem):
            yield from item.episodes
        else:
            yield item


def find_by_id(items: Iterable[MediaItem], item_id: str) -> Optional[MediaItem]:
    for item in items:
        if item.id == item_id:
            return item
        if isinstance(item, GroupItem):
            found = find_by_id(item.episodes, item_id)
            if found:
                return found
    return None


class LibraryService:
    """
    Builds the displayable media tree of each category from the file lister.
    """

    def __init__(self, config, lister, searcher=None, tag_reader=None,
                 artwork_url: str = "/api/artwork/{ref}"):
        self.config = config
        self.lister = lister
        self.searcher = searcher
        self.tag_reader = tag_reader
        self.artwork_url = artwork_url

    def available_categories(self) -> List[Category]:
        """
        Categories whose directory exists on the media source.
        """
        try:
            directories = self.lister.list_directories()
        except ListingError as e:
            logger.error(f"Error listing categories: {e}")
            return []

        present = {_directory_key(name) for name in directories}
        return [
            category for category in Category
            if _directory_key(self.config.directory_for(category)) in present
        ]

    def list_paths(self, category: Category) -> List[str]:
        directory = self.config.directory_for(category)
        try:
            return self.lister.list_files(directory)
        except ListingError as e:
            logger.error(f"Error getting {category.value} items: {e}")
            return []

    def build_item(self, file_path: str, category: Category) -> MediaItem:
        file_name = PurePath(file_path).name
        stem = os.path.splitext(file_name)[0]
        kind = category.kind

        fields = {
            "id": generate_id(file_name, category.value),
            "title": format_title(file_name),
            "original_file_name": stem,
            "path": self.lister.web_path(file_path),
            "type": kind,
            "genre": extract_genre(file_name),
            "year": extract_year(file_name),
            "description": f"{kind.value} - {file_name}",
        }

        if kind == MediaKind.MUSIC:
            fields.update(self._music_fields(file_path))
        elif self.searcher is not None and self.config.enrich_metadata:
            fields.update(self._metadata_fields(fields["title"], fields["year"], kind))

        return MediaItem(**fields)

    def _music_fields(self, file_path: str) -> Dict:
        if self.tag_reader is None:
            return {}
        local_path = self.lister.local_path(file_path)
        if local_path is None:
            return {}
        tags = self.tag_reader.read(local_path)
        if tags is None:
            return {}

        fields = {
            "title": tags.title,
            "artist": tags.artist,
            "album": tags.album,
            "year": tags.year,
            "genre": tags.genre,
            "poster": self.artwork_url.format(ref=tags.cover_ref) if tags.cover_ref else None,
        }
        return {key: value for key, value in fields.items() if value is not None}

    def _metadata_fields(self, title: str, year: Optional[int], kind: MediaKind) -> Dict:
        metadata = self.searcher.lookup_by_title(title, year, kind)
        if metadata is None:
            return {}
        fields = {
            "poster": metadata.poster,
            "backdrop": metadata.backdrop,
            "localized_title": metadata.localized_title,
            "localized_description": metadata.localized_description,
        }
        return {key: value for key, value in fields.items() if value is not None}

    def get_category_items(self, category) -> List[MediaItem]:
        """
        Ordered items of a category, series and sagas folded into groups.
        """
        category = Category.parse(category)
        items = [self.build_item(path, category) for path in self.list_paths(category)]
        logger.info(f"Found {len(items)} files in {category.value}")
        return sort_items(group_media_items(items, category))

    def get_categories(self) -> List[Dict]:
        return [
            {
                "name": self.config.directory_for(category),
                "type": category.value,
                "items": self.get_category_items(category),
            }
            for category in self.available_categories()
        ]

    def search(self, query: str, items: Iterable[MediaItem], limit: int = MAX_SEARCH_RESULTS) -> List[MediaItem]:
        return filter_by_query(flatten(items), query, limit=limit)
