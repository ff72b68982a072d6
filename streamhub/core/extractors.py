# Copyright (c) 2025 Trae AI. All rights reserved.

import re
from typing import Callable, List, Optional
from pydantic import BaseModel
from .normalizer import strip_noise


class SeriesInfo(BaseModel):
    series_title: str
    season_number: int
    episode_number: int

    @property
    def episode_code(self) -> str:
        return f"S{self.season_number:02d}E{self.episode_number:02d}"

    @property
    def sequence_hint(self) -> str:
        # SSEE, e.g. "0102" for S01E02
        return f"{self.season_number:02d}{self.episode_number:02d}"


class SequelInfo(BaseModel):
    base_title: str
    sequel_number: int
    has_subtitle: bool = False
    subtitle: Optional[str] = None


# --- Series / episode ---------------------------------------------------

SERIES_EPISODE_RE = re.compile(r"^(.+?)[._\s]S(\d{1,2})E(\d{1,2})(?!\d)", re.IGNORECASE)


def extract_series_info(filename: str) -> Optional[SeriesInfo]:
    """
    Detects "<Series.Name>.S01E02" markers. Returns None when absent.
    """
    match = SERIES_EPISODE_RE.match(filename)
    if not match:
        return None

    series_title = re.sub(r"[._\-\s]+", " ", match.group(1)).strip()
    if not series_title:
        return None

    season = int(match.group(2)) if match.group(2) else 1
    episode = int(match.group(3)) if match.group(3) else 1
    return SeriesInfo(series_title=series_title, season_number=season, episode_number=episode)


# --- Sequels ------------------------------------------------------------

ROMAN_NUMERALS = {
    "I": 1, "II": 2, "III": 3, "IV": 4, "V": 5,
    "VI": 6, "VII": 7, "VIII": 8, "IX": 9, "X": 10,
}

SEQUEL_INDICATORS = [
    "reloaded", "revolutions", "returns", "return", "awakens", "awakening",
    "origins", "origin", "legacy", "rises", "rising", "begins", "beginning",
    "resurrection", "revenge", "reborn", "redemption", "reckoning", "forever",
    "continues", "strikes back", "endgame", "infinity war", "dead man's chest",
    "at world's end", "retaliation", "resurgence", "revelations", "genesis",
    "apocalypse", "dawn", "first class", "homecoming", "far from home",
]
SEQUEL_INDICATOR_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in SEQUEL_INDICATORS) + r")\b",
    re.IGNORECASE,
)

SequelMatcher = Callable[[str], Optional[SequelInfo]]


def _clean_base_title(title: str) -> str:
    title = re.sub(r"[\s:\-]+$", "", title)
    return re.sub(r"[\s\-]+", " ", title).strip()


def _roman_to_int(numeral: str) -> int:
    return ROMAN_NUMERALS.get(numeral.upper(), 1)


def _numbered_matcher(pattern: str, to_number: Callable[[str], int], flags: int = re.IGNORECASE) -> SequelMatcher:
    regex = re.compile(pattern, flags)

    def matcher(text: str) -> Optional[SequelInfo]:
        match = regex.match(text)
        if not match:
            return None
        base_title = _clean_base_title(match.group("title"))
        if not base_title:
            return None
        return SequelInfo(base_title=base_title, sequel_number=to_number(match.group("number")))

    return matcher


def _subtitle_matcher(pattern: str) -> SequelMatcher:
    regex = re.compile(pattern)

    def matcher(text: str) -> Optional[SequelInfo]:
        match = regex.match(text)
        if not match:
            return None
        subtitle = match.group("subtitle").strip()
        if not SEQUEL_INDICATOR_RE.search(subtitle):
            return None
        base_title = _clean_base_title(match.group("title"))
        if not base_title:
            return None
        return SequelInfo(
            base_title=base_title, sequel_number=1, has_subtitle=True, subtitle=subtitle
        )

    return matcher


# Tried in order, first match wins. The subtitle matchers come last because
# they would swallow most numbered titles.
SEQUEL_MATCHERS: List[SequelMatcher] = [
    # "Title 2" (but not "Title Part 2", left to the dedicated matchers)
    _numbered_matcher(
        r"^(?P<title>.+?)(?<!\bpart)(?<!\bchapter)(?<!\bvolume)\s+(?P<number>\d+)$", int
    ),
    # "Title III", roman numerals are matched uppercase only
    _numbered_matcher(r"^(?P<title>.+?)\s+(?P<number>[IVXLC]+)$", _roman_to_int, flags=0),
    _numbered_matcher(r"^(?P<title>.+?)\s+Part\s+(?P<number>\d+)$", int),
    _numbered_matcher(r"^(?P<title>.+?)\s+Chapter\s+(?P<number>\d+)$", int),
    _numbered_matcher(r"^(?P<title>.+?)\s+Volume\s+(?P<number>\d+)$", int),
    _subtitle_matcher(r"^(?P<title>.+?)\s*:\s*(?P<subtitle>.+)$"),
    _subtitle_matcher(r"^(?P<title>.+?)\s+-\s+(?P<subtitle>.+)$"),
]


def extract_sequel_info(filename: str) -> Optional[SequelInfo]:
    """
    Detects sequel markers ("Title 2", "Title II", "Title Part 2",
    "Title: Reloaded", ...) on the raw filename. Returns None when absent.
    """
    text = strip_noise(filename)
    if not text:
        return None
    for matcher in SEQUEL_MATCHERS:
        info = matcher(text)
        if info:
            return info
    return None
