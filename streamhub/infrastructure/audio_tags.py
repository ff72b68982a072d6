# Copyright (c) 2025 Trae AI. All rights reserved.

import re
import logging
from pathlib import Path
from typing import Optional, Tuple
import mutagen
from mutagen import MutagenError
from mutagen.mp4 import MP4Cover
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class AudioTags(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    cover_ref: Optional[str] = None


def _first(tags, key: str) -> Optional[str]:
    values = tags.get(key) if tags else None
    if not values:
        return None
    value = str(values[0]).strip()
    return value or None


def _parse_year(date: Optional[str]) -> Optional[int]:
    if not date:
        return None
    match = re.search(r"\d{4}", date)
    return int(match.group(0)) if match else None


def extract_cover(audio) -> Optional[Tuple[bytes, str]]:
    """
    Embedded cover art as (bytes, mime) from ID3 APIC, FLAC pictures or MP4 covr.
    """
    pictures = getattr(audio, "pictures", None)
    if pictures:
        return pictures[0].data, pictures[0].mime or "image/jpeg"

    tags = getattr(audio, "tags", None)
    if tags is None:
        return None

    if hasattr(tags, "getall"):
        frames = tags.getall("APIC")
        if frames:
            return frames[0].data, frames[0].mime or "image/jpeg"

    covers = tags.get("covr") if hasattr(tags, "get") else None
    if covers:
        cover = covers[0]
        mime = "image/png" if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG else "image/jpeg"
        return bytes(cover), mime
    return None


class AudioTagReader:
    """
    Reads embedded tags of local audio files. Cover art goes to the artwork
    store and only its reference is returned.
    """

    def __init__(self, artwork_store=None):
        self.artwork_store = artwork_store

    def read(self, path: Path) -> Optional[AudioTags]:
        try:
            easy = mutagen.File(str(path), easy=True)
        except (MutagenError, OSError) as e:
            logger.warning(f"Cannot read tags of {path}: {e}")
            return None
        if easy is None:
            return None

        tags = AudioTags(
            title=_first(easy.tags, "title"),
            artist=_first(easy.tags, "artist"),
            album=_first(easy.tags, "album"),
            year=_parse_year(_first(easy.tags, "date")),
            genre=_first(easy.tags, "genre"),
        )

        if self.artwork_store is not None:
            try:
                cover = extract_cover(mutagen.File(str(path)))
            except (MutagenError, OSError) as e:
                logger.warning(f"Cannot read cover art of {path}: {e}")
                cover = None
            if cover:
                data, mime = cover
                tags = tags.model_copy(update={"cover_ref": self.artwork_store.put(data, mime)})

        return tags
