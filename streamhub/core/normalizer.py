# Copyright (c) 2025 Trae AI. All rights reserved.

import re
import unicodedata
from typing import Optional

MEDIA_EXTENSION_RE = re.compile(
    r"\.(?:mp4|mkv|avi|mov|webm|m4v|wmv|flv|mpe?g|mp3|flac|wav|m4a|aac|ogg|opus|wma)$",
    re.IGNORECASE,
)
BRACKETED_RE = re.compile(r"[\[(].*?[\])]")
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
SEASON_EPISODE_RE = re.compile(r"\bS\d{1,2}E\d{1,2}\b", re.IGNORECASE)

# Resolution, codec, source and release tags
QUALITY_TAGS = [
    "CAM", "TS", "TC", "SCR", "R5",
    "DVDRip", "BRRip", "BDRip", "BluRay", "HDTV", "WEBRip", "WEB-DL", "HDRip",
    "2160p", "1080p", "1080i", "720p", "480p", "4K", "UHD", "HDR", "10bit",
    "x264", "x265", "H264", "H265", "HEVC", "AVC", "XviD", "DivX",
    "AAC", "AC3", "DTS", "DDP", "Atmos", "IMAX",
    "MULTI", "VOSTFR", "TRUEFRENCH", "VFF", "VFQ",
]
QUALITY_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(tag) for tag in QUALITY_TAGS) + r")\b",
    re.IGNORECASE,
)

GENRES = ["action", "comedy", "drama", "horror", "sci-fi", "thriller", "romance", "animation"]


def strip_extension(filename: str) -> str:
    return MEDIA_EXTENSION_RE.sub("", filename)


def strip_noise(filename: str) -> str:
    """
    Removes extension, bracketed tags, years and quality tokens.
    Dashes are kept so that "Title - Subtitle" stays recognizable.
    """
    cleaned = strip_extension(filename)
    cleaned = BRACKETED_RE.sub(" ", cleaned)
    cleaned = re.sub(r"[._]", " ", cleaned)
    cleaned = YEAR_RE.sub(" ", cleaned)
    cleaned = QUALITY_RE.sub(" ", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def normalize(filename: str) -> str:
    """
    Turns a raw filename into a comparable title string.
    """
    cleaned = strip_noise(filename).replace("-", " ")
    return re.sub(r"\s+", " ", cleaned).strip()


def title_case(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def format_title(filename: str) -> str:
    """
    Display title for a file: normalized, then each word capitalized.
    """
    cleaned = normalize(filename)
    if not cleaned:
        # Nothing but noise (e.g. "2019.mp4"): keep the separated basename
        cleaned = re.sub(r"[._-]", " ", strip_extension(filename))
        cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return title_case(cleaned)


def clean_query_title(title: str) -> str:
    """
    Title used to query the movie database.
    """
    cleaned = SEASON_EPISODE_RE.sub(" ", normalize(title))
    return re.sub(r"\s+", " ", cleaned).strip()


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def slugify(text: str) -> str:
    """
    Lowercase, underscore-joined alphanumerics.
    """
    slug = strip_diacritics(text).lower()
    slug = re.sub(r"[^a-z0-9\s]", "", slug)
    return re.sub(r"\s+", "_", slug.strip())


def extract_year(filename: str) -> Optional[int]:
    match = YEAR_RE.search(filename.replace("_", " "))
    return int(match.group(0)) if match else None


def extract_genre(filename: str) -> Optional[str]:
    lowered = filename.lower()
    for genre in GENRES:
        if genre in lowered:
            return genre.capitalize()
    return None
