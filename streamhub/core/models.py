# Copyright (c) 2025 Trae AI. All rights reserved.

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from .normalizer import strip_diacritics


class UnknownCategoryError(ValueError):
    pass


class MediaKind(Enum):
    MOVIE = "movie"
    SERIES = "series"
    MUSIC = "music"


class Category(Enum):
    FILMS = "films"
    SERIES = "series"
    MUSIQUES = "musiques"

    @property
    def kind(self) -> MediaKind:
        return _CATEGORY_KINDS[self]

    @classmethod
    def parse(cls, name: str) -> "Category":
        """
        Maps any spelling of a category ("Films", "Séries", "series", "music") to the enum.
        """
        if isinstance(name, cls):
            return name
        key = strip_diacritics(str(name or "").strip().lower())
        try:
            return _CATEGORY_ALIASES[key]
        except KeyError:
            raise UnknownCategoryError(f"Unknown category: {name!r}") from None


_CATEGORY_KINDS = {
    Category.FILMS: MediaKind.MOVIE,
    Category.SERIES: MediaKind.SERIES,
    Category.MUSIQUES: MediaKind.MUSIC,
}

_CATEGORY_ALIASES = {
    "films": Category.FILMS,
    "film": Category.FILMS,
    "movies": Category.FILMS,
    "series": Category.SERIES,
    "serie": Category.SERIES,
    "musiques": Category.MUSIQUES,
    "musique": Category.MUSIQUES,
    "music": Category.MUSIQUES,
}


class MediaItem(BaseModel):
    """
    A single discovered file, ready for display.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    title: str
    original_file_name: str
    path: str
    type: MediaKind
    genre: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None

    # Metadata enrichment
    poster: Optional[str] = None
    backdrop: Optional[str] = None
    localized_title: Optional[str] = None
    localized_description: Optional[str] = None

    # Music only
    artist: Optional[str] = None
    album: Optional[str] = None

    # Set when the item is a child of a group
    series_title: Optional[str] = None
    season_number: Optional[int] = None
    episode_number: Optional[int] = None
    episode_code: Optional[str] = None
    sequel_number: Optional[int] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GroupItem(MediaItem):
    """
    A series or saga, displayed with the fields of its first child.
    """

    is_group: bool = True
    episodes: List[MediaItem] = Field(default_factory=list)

    @computed_field(alias="episodeCount")
    @property
    def episode_count(self) -> int:
        return len(self.episodes)
