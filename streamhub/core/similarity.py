# Copyright (c) 2025 Trae AI. All rights reserved.

import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Sequence
from rapidfuzz.distance import Levenshtein
from .normalizer import BRACKETED_RE, QUALITY_RE, YEAR_RE, strip_extension
from .extractors import ROMAN_NUMERALS, SEQUEL_INDICATOR_RE

SAGA_SIMILARITY_THRESHOLD = 0.7
SAGA_KEY_WORDS = 3

_ROMAN_TOKENS = {numeral.lower() for numeral in ROMAN_NUMERALS}
_NUMBERING_WORDS = {"part", "chapter", "volume"}


@dataclass
class SagaCluster:
    base_title: str
    items: List[Any] = field(default_factory=list)


def edit_distance(a: str, b: str) -> int:
    return Levenshtein.distance(a, b)


def calculate_similarity(a: str, b: str) -> float:
    """
    Normalized Levenshtein similarity in [0, 1].
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - edit_distance(a, b)) / max_len


def _drop_sequel_markers(words: List[str]) -> List[str]:
    """
    Drops numbering and sequel-indicator words after the first word, so that
    "matrix 2" and "matrix reloaded" share the key "matrix".
    """
    if len(words) < 2:
        return words
    rest = SEQUEL_INDICATOR_RE.sub(" ", " ".join(words[1:])).split()
    kept = [
        word for word in rest
        if not word.isdigit() and word not in _ROMAN_TOKENS and word not in _NUMBERING_WORDS
    ]
    return [words[0]] + kept


def saga_key(filename: str) -> str:
    """
    Clustering key: the first three meaningful words of the lowercased name.
    """
    key = strip_extension(filename).lower()
    key = BRACKETED_RE.sub(" ", key)
    key = YEAR_RE.sub(" ", key)
    key = re.sub(r"[^\w\s]|_", " ", key)
    key = QUALITY_RE.sub(" ", key)
    words = key.split()
    return " ".join(_drop_sequel_markers(words)[:SAGA_KEY_WORDS])


def detect_saga_clusters(
    items: Sequence[Any],
    key: Callable[[Any], str] = lambda item: item.original_file_name,
    threshold: float = SAGA_SIMILARITY_THRESHOLD,
) -> List[SagaCluster]:
    """
    Greedy clustering of titles without explicit sequel markers.

    Each item joins the first existing cluster whose representative key is
    more than `threshold` similar, otherwise it starts a new cluster. Only
    clusters with at least two members are returned.
    """
    clusters: List[SagaCluster] = []
    for item in items:
        item_key = saga_key(key(item))
        if not item_key:
            continue
        for cluster in clusters:
            if calculate_similarity(item_key, cluster.base_title) > threshold:
                cluster.items.append(item)
                break
        else:
            clusters.append(SagaCluster(base_title=item_key, items=[item]))

    return [cluster for cluster in clusters if len(cluster.items) > 1]
