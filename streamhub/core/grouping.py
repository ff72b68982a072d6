# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from pathlib import PurePosixPath
from typing import Dict, List, Sequence, Tuple
from .models import Category, GroupItem, MediaItem
from .identity import filename_slug, generate_id, group_id
from .extractors import extract_series_info, extract_sequel_info
from .similarity import SagaCluster, detect_saga_clusters
from .normalizer import slugify, title_case
from .sorter import sort_items

logger = logging.getLogger(__name__)

CHILD_ONLY_FIELDS = {"season_number", "episode_number", "episode_code", "sequel_number"}


# Words dropped from the end of a saga title ("harry potter and" -> "Harry Potter")
TRAILING_STOP_WORDS = {
    "a", "an", "and", "of", "the", "in", "on", "to", "for", "at", "vs",
    "et", "de", "du", "des", "la", "le", "les", "l", "d", "un", "une",
}


class GroupAccumulator:
    """
    Collects the children of one group while a category is being processed.
    """

    def __init__(self, key: str, group_id: str, title: str):
        self.key = key
        self.group_id = group_id
        self.title = title
        self.children: List[MediaItem] = []
        self._ranks: List[int] = []

    def add(self, child: MediaItem, rank: int = 1):
        """
        `rank` breaks ties between children with the same sort key; lower
        ranks come first, then insertion order.
        """
        self.children.append(child)
        self._ranks.append(rank)

    def finalize(self, sort_key) -> GroupItem:
        order = sorted(
            range(len(self.children)),
            key=lambda i: (sort_key(self.children[i]), self._ranks[i], i),
        )
        episodes = [self.children[i] for i in order]
        representative = episodes[0]
        fields = representative.model_dump(exclude={"id", "title"} | CHILD_ONLY_FIELDS)
        return GroupItem(**fields, id=self.group_id, title=self.title, episodes=episodes)


def _file_name(item: MediaItem) -> str:
    return PurePosixPath(item.path).name or item.original_file_name


def _find_or_create(
    groups: Dict[str, GroupAccumulator], title: str, namespace: str
) -> GroupAccumulator:
    # Keyed like the id, so two groups never share an id
    key = slugify(title) or "untitled"
    if key not in groups:
        groups[key] = GroupAccumulator(key, group_id(namespace, title), title)
    return groups[key]


def saga_title(base_title: str) -> str:
    words = base_title.split()
    while len(words) > 1 and words[-1].lower() in TRAILING_STOP_WORDS:
        words.pop()
    return title_case(" ".join(words))


def _group_series(items: Sequence[MediaItem]) -> Tuple[List[GroupItem], List[MediaItem]]:
    groups: Dict[str, GroupAccumulator] = {}
    ungrouped: List[MediaItem] = []

    for item in items:
        info = extract_series_info(item.original_file_name)
        if info is None:
            ungrouped.append(item)
            continue

        group = _find_or_create(groups, info.series_title, "series")
        group.add(item.model_copy(update={
            "id": generate_id(_file_name(item), "episode", info.sequence_hint),
            "series_title": group.title,
            "season_number": info.season_number,
            "episode_number": info.episode_number,
            "episode_code": info.episode_code,
        }))

    finalized = [
        group.finalize(lambda child: (child.season_number, child.episode_number))
        for group in groups.values()
    ]
    return finalized, ungrouped


def _cluster_positions(clusters: List[SagaCluster]) -> Dict[int, Tuple[SagaCluster, int]]:
    positions = {}
    for cluster in clusters:
        for position, member in enumerate(cluster.items, start=1):
            positions.setdefault(id(member), (cluster, position))
    return positions


def _group_films(items: Sequence[MediaItem]) -> Tuple[List[GroupItem], List[MediaItem]]:
    clusters = detect_saga_clusters(items)
    positions = _cluster_positions(clusters)
    groups: Dict[str, GroupAccumulator] = {}
    ungrouped: List[MediaItem] = []
    saga_members: List[MediaItem] = []

    def add_child(group: GroupAccumulator, item: MediaItem, sequel_number: int, rank: int = 1):
        group.add(item.model_copy(update={
            "id": generate_id(_file_name(item), "film", sequel_number),
            "sequel_number": sequel_number,
        }), rank)

    # Explicitly numbered entries first, so saga members can join their groups
    for item in items:
        info = extract_sequel_info(item.original_file_name)
        if info is not None:
            add_child(_find_or_create(groups, info.base_title, "sequel"), item, info.sequel_number)
        elif id(item) in positions:
            saga_members.append(item)
        else:
            ungrouped.append(item)

    for item in saga_members:
        cluster, position = positions[id(item)]
        group = _find_or_create(groups, saga_title(cluster.base_title), "saga")
        if filename_slug(item.original_file_name) == group.key:
            # The unnumbered first film ("Toy Story") opens its franchise
            add_child(group, item, 1, rank=0)
        else:
            add_child(group, item, position)

    finalized = [
        group.finalize(lambda child: child.sequel_number or 1) for group in groups.values()
    ]
    return finalized, ungrouped


def group_media_items(items: Sequence[MediaItem], category: Category) -> List[MediaItem]:
    """
    Builds series and saga groups for a category's items.

    Series files sharing a title become one group ordered by season and
    episode; films sharing a sequel base title or a saga cluster become one
    group ordered by sequel number. The combined list is sorted for display.
    Other categories are returned unchanged.
    """
    if category is Category.SERIES:
        groups, ungrouped = _group_series(items)
    elif category is Category.FILMS:
        groups, ungrouped = _group_films(items)
    else:
        return list(items)

    logger.debug(
        f"Grouped {len(items)} {category.value} items into {len(groups)} groups, "
        f"{len(ungrouped)} left ungrouped"
    )
    return sort_items([*groups, *ungrouped])
