# Copyright (c) 2025 Trae AI. All rights reserved.

from types import SimpleNamespace
from streamhub.core.sorter import collation_key, sort_for_display, sort_items


def _titles(items):
    return [item.title for item in items]


def test_sort_for_display_drops_articles_and_tags():
    assert sort_for_display("The Matrix") == "matrix"
    assert sort_for_display("Le Parrain") == "parrain"
    assert sort_for_display("[HD] Film") == "film"
    assert sort_for_display("Alien: Romulus!") == "alien romulus"
    assert sort_for_display("") == ""


def test_accents_and_case_do_not_change_order():
    items = [SimpleNamespace(title=t) for t in ["Zorro", "Éclair", "avatar", "Amélie"]]
    assert _titles(sort_items(items)) == ["Amélie", "avatar", "Éclair", "Zorro"]


def test_articles_are_ignored_when_sorting():
    items = [SimpleNamespace(title=t) for t in ["The Wire", "Les Misérables", "Babylon"]]
    assert _titles(sort_items(items)) == ["Babylon", "Les Misérables", "The Wire"]


def test_equal_keys_keep_input_order():
    items = [SimpleNamespace(title=t, n=n) for n, t in enumerate(["Amelie", "amélie", "AMÉLIE"])]
    assert [item.n for item in sort_items(items)] == [0, 1, 2]


def test_ligatures_fold():
    assert collation_key("Œdipe") == collation_key("oedipe")
