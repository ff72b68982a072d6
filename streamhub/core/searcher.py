# Copyright (c) 2025 Trae AI. All rights reserved.

import time
import logging
import threading
import requests
from typing import Optional, List, Dict, Tuple
from pydantic import BaseModel, Field
from .models import MediaKind
from .normalizer import clean_query_title

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


class MetadataResult(BaseModel):
    tmdb_id: Optional[int] = None
    poster: Optional[str] = None
    backdrop: Optional[str] = None
    localized_title: Optional[str] = None
    localized_description: Optional[str] = None
    original_title: Optional[str] = None
    release_date: Optional[str] = None
    release_year: Optional[int] = None
    genres: List[int] = Field(default_factory=list)
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None


class Searcher:
    """
    Looks up posters and localized titles on TMDB with rate limiting support.
    """

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: Optional[str], language: str = "fr-FR", max_retries: int = 3):
        self.api_key = api_key
        self.language = language
        self.max_retries = max_retries
        self._cache: Dict[Tuple[str, Optional[int], str], Optional[MetadataResult]] = {}
        self._lock = threading.Lock()

    def _handle_rate_limit(self, response: requests.Response):
        """
        Handles TMDB rate limiting based on response headers.
        """
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_time = response.headers.get("X-RateLimit-Reset")

        if remaining is not None and int(remaining) <= 1 and reset_time:
            wait_time = float(reset_time) - time.time()
            if wait_time > 0:
                logger.info(f"Rate limit reached. Waiting for {wait_time:.2f} seconds...")
                time.sleep(wait_time + 0.1)

    def _get(self, url: str, params: Dict) -> Optional[Dict]:
        """
        GET with rate limit handling and retries. Returns None on failure.
        """
        retry_count = 0
        while retry_count <= self.max_retries:
            response = None
            try:
                response = requests.get(url, params=params, timeout=10)
                self._handle_rate_limit(response)

                if response.status_code == 429:
                    retry_after = response.headers.get("Retry-After")
                    time.sleep(int(retry_after) if retry_after else 1)
                    retry_count += 1
                    continue

                response.raise_for_status()
                return response.json()
            except requests.exceptions.RequestException as e:
                # A missing resource will not appear on retry
                if response is not None and response.status_code == 404:
                    logger.info(f"Request failed: 404 Not Found for url: {url}. No retry.")
                    return None

                retry_count += 1
                if retry_count > self.max_retries:
                    logger.error(f"Request error for {url}: {e}. Max retries ({self.max_retries}) exceeded.")
                    return None

                logger.warning(f"Request failed: {e}. Retrying ({retry_count}/{self.max_retries})...")
                # Backoff doubles each attempt, capped at 32s
                time.sleep(2 ** min(retry_count, 5))
        return None

    @staticmethod
    def _image_url(path: Optional[str], size: str) -> Optional[str]:
        return f"{IMAGE_BASE_URL}/{size}{path}" if path else None

    def lookup_by_title(
        self, title: str, year: Optional[int] = None, kind: MediaKind = MediaKind.MOVIE
    ) -> Optional[MetadataResult]:
        """
        Best TMDB match for a title, or None. Misses are cached too.
        """
        if not self.api_key or kind == MediaKind.MUSIC:
            return None

        search_term = clean_query_title(title)
        if not search_term:
            return None

        cache_key = (search_term.lower(), year, kind.value)
        with self._lock:
            if cache_key in self._cache:
                return self._cache[cache_key]

        result = self._search(search_term, year, kind)
        with self._lock:
            self._cache[cache_key] = result
        return result

    def _search(self, search_term: str, year: Optional[int], kind: MediaKind) -> Optional[MetadataResult]:
        tmdb_type = "movie" if kind == MediaKind.MOVIE else "tv"
        year_param = "year" if tmdb_type == "movie" else "first_air_date_year"
        logger.info(f"Searching TMDB for: '{search_term}' ({tmdb_type}, year={year})")

        params = {"api_key": self.api_key, "query": search_term, "language": self.language}
        if year:
            params[year_param] = year

        data = self._get(f"{self.BASE_URL}/search/{tmdb_type}", params)
        raw_results = data.get("results", []) if data else []
        if not raw_results and year:
            params = {key: value for key, value in params.items() if key != year_param}
            data = self._get(f"{self.BASE_URL}/search/{tmdb_type}", params)
            raw_results = data.get("results", []) if data else []

        if not raw_results:
            return None

        best = raw_results[0]
        date_val = best.get("release_date" if tmdb_type == "movie" else "first_air_date") or ""
        result = MetadataResult(
            tmdb_id=best.get("id"),
            poster=self._image_url(best.get("poster_path"), "w500"),
            backdrop=self._image_url(best.get("backdrop_path"), "w1280"),
            localized_title=best.get("title" if tmdb_type == "movie" else "name"),
            localized_description=best.get("overview") or None,
            original_title=best.get("original_title" if tmdb_type == "movie" else "original_name"),
            release_date=date_val or None,
            release_year=int(date_val[:4]) if date_val[:4].isdigit() else None,
            genres=best.get("genre_ids") or [],
            vote_average=best.get("vote_average"),
            vote_count=best.get("vote_count"),
        )

        # English details give the international title when the original one is not latin
        if best.get("id") is not None and not self.language.startswith("en"):
            params_en = {"api_key": self.api_key, "language": "en-US"}
            details = self._get(f"{self.BASE_URL}/{tmdb_type}/{best.get('id')}", params_en)
            if details:
                title_en = details.get("title" if tmdb_type == "movie" else "name")
                if title_en:
                    result = result.model_copy(update={"original_title": title_en})

        return result
