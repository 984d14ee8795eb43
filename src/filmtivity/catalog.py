import logging
from dataclasses import dataclass
from typing import Optional, Union

import requests

from filmtivity.errors import NetworkError, ValidationError

logger = logging.getLogger(__name__)

TMDB_BASE_URL = 'https://api.themoviedb.org/3'


def _text(value):
    return value if isinstance(value, str) else ''


def _number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class MovieSummary:
    """A movie as the pages show it, built from one TMDB result."""

    id: Optional[Union[int, str]]
    title: str
    overview: str = ''
    vote_average: Optional[float] = None
    poster_path: Optional[str] = None
    release_date: str = ''
    original_language: str = ''

    @classmethod
    def from_api(cls, raw):
        return cls(
            id=raw.get('id'),
            title=_text(raw.get('title')) or 'Untitled',
            overview=_text(raw.get('overview')),
            vote_average=_number(raw.get('vote_average')),
            poster_path=_text(raw.get('poster_path')) or None,
            release_date=_text(raw.get('release_date')),
            original_language=_text(raw.get('original_language')),
        )


def _results(data):
    if not isinstance(data, dict):
        return []
    results = data.get('results')
    if not isinstance(results, list):
        return []
    return [raw for raw in results if isinstance(raw, dict)]


class CatalogClient:
    def __init__(self, api_key, base_url=TMDB_BASE_URL, timeout=10, top_limit=12):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.top_limit = top_limit

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config['TMDB_API_KEY'],
            base_url=config.get('TMDB_BASE_URL', TMDB_BASE_URL),
            timeout=config.get('TMDB_TIMEOUT', 10),
            top_limit=config.get('TOP_MOVIES_LIMIT', 12),
        )

    def _get(self, path, **params):
        params['api_key'] = self.api_key
        url = f'{self.base_url}{path}'
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            raise NetworkError(f'GET {path} failed: {exc}') from exc

    def fetch_top_movies(self):
        """Fetch the most popular movies, at most ``top_limit`` of them."""
        try:
            data = self._get('/discover/movie', sort_by='popularity.desc')
        except NetworkError as exc:
            logger.error('Could not fetch popular movies: %s', exc)
            return []
        return [MovieSummary.from_api(raw) for raw in _results(data)[:self.top_limit]]

    def search_movie(self, query):
        """Return the first movie matching ``query``, or None when nothing matches.

        A blank query is rejected with ValidationError before any request is
        made. NetworkError propagates to the caller.
        """
        query = (query or '').strip()
        if not query:
            raise ValidationError('Please enter a movie title')

        results = _results(self._get('/search/movie', query=query))
        if not results:
            logger.info('No movie found for %r', query)
            return None
        return MovieSummary.from_api(results[0])
