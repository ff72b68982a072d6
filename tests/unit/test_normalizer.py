# Copyright (c) 2025 Trae AI. All rights reserved.

import pytest
from streamhub.core.normalizer import (
    normalize, format_title, clean_query_title, extract_year, extract_genre, slugify, strip_noise
)


@pytest.mark.parametrize("filename, expected", [
    ("The.Matrix.1999.1080p.BluRay.x264.mkv", "The Matrix"),
    ("[YTS] Inception (2010) [720p].mp4", "Inception"),
    ("le_fabuleux_destin_d_amelie_poulain.avi", "le fabuleux destin d amelie poulain"),
    ("Alien-Romulus.WEB-DL.HEVC.mkv", "Alien Romulus"),
    ("  spaced   out  .mp4", "spaced out"),
])
def test_normalize(filename, expected):
    assert normalize(filename) == expected


def test_strip_noise_keeps_dashes():
    assert strip_noise("Star.Wars - The.Empire.Strikes.Back.1980.mkv") == "Star Wars - The Empire Strikes Back"


def test_format_title_capitalizes_words():
    assert format_title("die_hard-with.a.vengeance.mp4") == "Die Hard With A Vengeance"


def test_format_title_falls_back_when_only_noise():
    assert format_title("2019.mp4") == "2019"


def test_clean_query_title_drops_episode_marker():
    assert clean_query_title("Breaking.Bad.S01E01.720p.mkv") == "Breaking Bad"


def test_extract_year():
    assert extract_year("Die.Hard.1988.mp4") == 1988
    assert extract_year("Movie_2021_FRENCH.mkv") == 2021
    assert extract_year("Apollo 13.mp4") is None


def test_extract_genre():
    assert extract_genre("my_action_movie.mp4") == "Action"
    assert extract_genre("Sci-Fi Classics.mkv") == "Sci-fi"
    assert extract_genre("Nothing Here.mkv") is None


def test_slugify_strips_accents_and_punctuation():
    assert slugify("Amélie Poulain!") == "amelie_poulain"
    assert slugify("  ") == ""
