# Copyright (c) 2025 Trae AI. All rights reserved.

import hashlib
from typing import Optional, Union
from .normalizer import normalize, slugify

HASH_LENGTH = 6


def filename_slug(filename: str) -> str:
    return slugify(normalize(filename)) or "untitled"


def content_hash(filename: str, category: str, sequence_hint: Optional[str] = None) -> str:
    payload = f"{filename}{category}{sequence_hint or ''}"
    return hashlib.md5(payload.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def generate_id(
    filename: str, category: str, sequence_hint: Optional[Union[str, int]] = None
) -> str:
    """
    Stable identifier for a file, used in player URLs.

    The same (filename, category, hint) always yields the same id; the
    hash suffix keeps ids apart when two filenames share a slug.
    """
    slug = filename_slug(filename)
    hint = str(sequence_hint) if sequence_hint is not None and sequence_hint != "" else None
    category_key = str(category).lower()

    if category_key == "episode":
        base_id = f"episode_{slug}_{hint or 'unknown'}"
    elif category_key == "film" and hint:
        base_id = f"film_{slug}_{hint}"
    else:
        base_id = f"{category_key}_{slug}"
        if hint:
            base_id = f"{base_id}_{hint}"

    return f"{base_id}_{content_hash(filename, str(category), hint)}"


def group_id(namespace: str, title: str) -> str:
    """
    Id of a synthesized group: series_*, sequel_* or saga_*.
    """
    return f"{namespace}_{slugify(title) or 'untitled'}"
