# Copyright (c) 2025 Trae AI. All rights reserved.

import re
from streamhub.core.identity import generate_id, group_id


def test_same_inputs_give_same_id():
    first = generate_id("Die.Hard.1988.mp4", "Films")
    second = generate_id("Die.Hard.1988.mp4", "Films")
    assert first == second
    assert re.fullmatch(r"films_die_hard_[0-9a-f]{6}", first)


def test_sequence_hint_changes_id():
    assert generate_id("Die.Hard.1988.mp4", "Films") != generate_id("Die.Hard.1988.mp4", "Films", "2")


def test_filename_changes_id():
    assert generate_id("Die.Hard.1988.mp4", "Films") != generate_id("Die.Hard.2.1990.mp4", "Films")


def test_colliding_slugs_are_kept_apart_by_hash():
    # Both normalize to "movie"
    mkv = generate_id("Movie.mkv", "films")
    mp4 = generate_id("Movie.mp4", "films")
    assert mkv.startswith("films_movie_") and mp4.startswith("films_movie_")
    assert mkv != mp4


def test_episode_template():
    assert generate_id("Breaking.Bad.S01E02.mp4", "episode", "0102").startswith(
        "episode_breaking_bad_s01e02_0102_"
    )
    assert generate_id("Show.mp4", "episode").startswith("episode_show_unknown_")


def test_film_template_with_hint():
    assert generate_id("Matrix 2.mp4", "film", 2).startswith("film_matrix_2_2_")
    assert re.fullmatch(r"film_matrix_[0-9a-f]{6}", generate_id("Matrix.mp4", "film"))


def test_empty_slug():
    assert generate_id("2019.mp4", "films").startswith("films_untitled_")


def test_group_id():
    assert group_id("sequel", "Matrix") == "sequel_matrix"
    assert group_id("series", "Breaking Bad") == "series_breaking_bad"
