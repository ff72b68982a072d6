# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import Iterable, List, Optional
from urllib.parse import unquote
from .models import MediaItem
from .normalizer import strip_diacritics
from .sorter import sort_items

MAX_SEARCH_RESULTS = 20


def _forms(text: Optional[str]):
    raw = (text or "").lower()
    return raw, strip_diacritics(raw)


def matches_query(item: MediaItem, query: str) -> bool:
    """
    Substring match on title or localized title, with or without accents.
    """
    raw_query, plain_query = _forms(query)
    for field in (item.title, item.localized_title):
        if not field:
            continue
        raw_field, plain_field = _forms(field)
        if raw_query in raw_field or plain_query in plain_field:
            return True
    return False


def filter_by_query(
    items: Iterable[MediaItem], query: str, limit: int = MAX_SEARCH_RESULTS
) -> List[MediaItem]:
    query = unquote(query or "").strip()
    if not query:
        return []
    matches = [item for item in items if matches_query(item, query)]
    return sort_items(matches)[:limit]
