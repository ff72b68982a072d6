# Copyright (c) 2025 Trae AI. All rights reserved.

from types import SimpleNamespace
from streamhub.core.similarity import (
    calculate_similarity, detect_saga_clusters, edit_distance, saga_key
)


def _items(*names):
    return [SimpleNamespace(original_file_name=name) for name in names]


def test_edit_distance():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3


def test_similarity_bounds():
    assert calculate_similarity("matrix", "matrix") == 1.0
    assert calculate_similarity("abc", "xyz") == 0.0
    assert calculate_similarity("", "") == 1.0
    assert 0.0 < calculate_similarity("matrix", "matrix 2") < 1.0


def test_similarity_is_symmetric():
    assert calculate_similarity("star wars", "star trek") == calculate_similarity("star trek", "star wars")


def test_saga_key_keeps_first_three_words():
    assert saga_key("The.Lord.of.the.Rings.2001.1080p.mkv") == "the lord of"


def test_saga_key_drops_numbering_and_sequel_words():
    assert saga_key("Matrix 1") == "matrix"
    assert saga_key("Matrix 2") == "matrix"
    assert saga_key("Matrix Reloaded") == "matrix"
    assert saga_key("Rocky.II.1979") == "rocky"


def test_clusters_require_two_members():
    clusters = detect_saga_clusters(_items(
        "Harry.Potter.and.the.Philosophers.Stone",
        "Inception",
        "Harry.Potter.and.the.Chamber.of.Secrets",
    ))
    assert len(clusters) == 1
    assert clusters[0].base_title == "harry potter and"
    assert [i.original_file_name for i in clusters[0].items] == [
        "Harry.Potter.and.the.Philosophers.Stone",
        "Harry.Potter.and.the.Chamber.of.Secrets",
    ]


def test_first_matching_cluster_wins():
    # The last key is similar to both representatives; it joins the earlier one
    clusters = detect_saga_clusters(_items(
        "aaaaaaaaaa", "aaaaaabbbb", "aaaaaaaabb", "aaaaaabbbc",
    ))
    assert [c.base_title for c in clusters] == ["aaaaaaaaaa", "aaaaaabbbb"]
    assert [i.original_file_name for i in clusters[0].items] == ["aaaaaaaaaa", "aaaaaaaabb"]


def test_threshold_is_strict():
    # 7 of 10 characters equal gives exactly 0.7, which is not enough
    assert detect_saga_clusters(_items("aaaaaaaaaa", "aaaaaaabbb")) == []
