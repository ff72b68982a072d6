# Copyright (c) 2025 Trae AI. All rights reserved.

import re
from typing import Iterable, List, TypeVar
from .normalizer import strip_diacritics

T = TypeVar("T")

LEADING_ARTICLE_RE = re.compile(r"^(?:the|le|la|les|un|une|des|\[.*?\])\s+", re.IGNORECASE)

# Ligatures that canonical decomposition leaves alone
_LIGATURES = str.maketrans({"œ": "oe", "æ": "ae", "ß": "ss"})


def sort_for_display(title: str) -> str:
    """
    Title without leading article or bracket tag, punctuation or padding.
    """
    key = (title or "").lower()
    key = LEADING_ARTICLE_RE.sub("", key)
    key = re.sub(r"[^\w\s]", "", key)
    return key.strip()


def collation_key(title: str) -> str:
    """
    French base-sensitivity collation: accents and case do not change the order.
    """
    return strip_diacritics(sort_for_display(title).translate(_LIGATURES)).casefold()


def sort_items(items: Iterable[T]) -> List[T]:
    """
    Sorts media items by title for display. Stable for equal keys.
    """
    return sorted(items, key=lambda item: collation_key(item.title))
