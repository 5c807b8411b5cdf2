"""
Fetcher module.
Issues single queries against the movie provider and returns raw result pages.
Timeouts, transport failures and error statuses are raised as ProviderError subclasses;
there are no retries at this layer.
"""

from typing import Any, Dict, List, Optional  # type hints

import requests  # HTTP client
from loguru import logger  # console logging

from .config import Settings  # provider configuration
from .errors import (
	MovieNotFound,
	ProviderHTTPError,
	ProviderTimeout,
	ProviderTransportError,
)
from .models import MovieId, RawPage  # raw page container


class MovieFetcher:
	"""
	Base fetcher: owns the HTTP session and maps transport outcomes to the error taxonomy.
	Subclasses only describe how a provider lays out its URLs, params and payloads.
	"""

	provider = ''  # provider name used in log messages

	def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
		self.settings = settings  # read-only configuration
		self.session = session or requests.Session()  # shared across worker threads for GETs
		self.timeout = settings.request_timeout  # fixed per-call timeout

	def fetch(self, term: str, page: int = 1) -> RawPage:
		"""Run one search query for `term` and return the raw page."""
		if not term or not term.strip():
			raise ValueError("Search term cannot be empty")
		if page < 1:
			raise ValueError("Page numbers start at 1")
		return self._search(term.strip(), page)

	def fetch_detail(self, movie_id: MovieId) -> Dict[str, Any]:
		"""Return the raw detail record for a single movie."""
		if movie_id is None or str(movie_id).strip() == '':
			raise ValueError("Movie id cannot be empty")
		return self._detail(movie_id)

	def _search(self, term: str, page: int) -> RawPage:
		raise NotImplementedError

	def _detail(self, movie_id: MovieId) -> Dict[str, Any]:
		raise NotImplementedError

	def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
		"""
		Perform one GET and decode the JSON body.
		Raises ProviderTimeout, ProviderTransportError or ProviderHTTPError.
		"""
		logger.debug(f"[Fetcher] {self.provider} GET {url} params={self._loggable(params)}")
		try:
			resp = self.session.get(url, params=params, timeout=self.timeout)
		except requests.Timeout as e:
			raise ProviderTimeout(f"{self.provider} request timed out after {self.timeout}s") from e
		except requests.RequestException as e:
			raise ProviderTransportError(f"{self.provider} request failed: {e}") from e

		if not 200 <= resp.status_code < 300:
			raise ProviderHTTPError(resp.status_code)

		try:
			payload = resp.json()
		except ValueError as e:
			raise ProviderTransportError(f"{self.provider} returned a non-JSON body") from e
		if not isinstance(payload, dict):
			raise ProviderTransportError(f"{self.provider} returned a JSON {type(payload).__name__}, expected an object")
		return payload

	@staticmethod
	def _parse_total(value) -> int:
		try:
			return int(value)
		except (TypeError, ValueError):
			return 0

	@staticmethod
	def _records(value) -> List[Dict[str, Any]]:
		"""Only the object entries of a result list; anything else yields no records."""
		if not isinstance(value, list):
			return []
		return [r for r in value if isinstance(r, dict)]

	@staticmethod
	def _loggable(params: Dict[str, Any]) -> Dict[str, Any]:
		"""Copy of the query params with credentials masked."""
		return {k: ('***' if k in ('apikey', 'api_key') else v) for k, v in params.items()}


class OmdbFetcher(MovieFetcher):
	"""Fetcher for omdbapi.com (single endpoint, query-parameter driven)."""

	provider = 'omdb'

	def _search(self, term: str, page: int) -> RawPage:
		params = {
			'apikey': self.settings.api_key,
			's': term,
			'type': 'movie',
			'page': page,
		}
		payload = self._get_json(self.settings.base_url, params)
		if payload.get('Response') == 'True' and payload.get('Search'):
			return RawPage(
				records=self._records(payload['Search']),
				total_results=self._parse_total(payload.get('totalResults')),
			)

		# OMDb reports most problems with HTTP 200 and Response=False
		self._raise_for_error_payload(payload)
		logger.debug(f"[Fetcher] omdb no results for '{term}': {payload.get('Error')}")
		return RawPage()

	def _detail(self, movie_id: MovieId) -> Dict[str, Any]:
		params = {
			'apikey': self.settings.api_key,
			'i': movie_id,
			'plot': 'full',
		}
		payload = self._get_json(self.settings.base_url, params)
		if payload.get('Response') == 'True':
			return payload
		self._raise_for_error_payload(payload)
		raise MovieNotFound(movie_id, payload.get('Error') or None)

	@staticmethod
	def _raise_for_error_payload(payload: Dict[str, Any]):
		error = str(payload.get('Error') or '').lower()
		if 'invalid api key' in error or 'no api key' in error:
			raise ProviderHTTPError(401, payload.get('Error'))
		if 'request limit' in error:
			raise ProviderHTTPError(429, payload.get('Error'))


class TmdbFetcher(MovieFetcher):
	"""Fetcher for The Movie Database v3 REST API."""

	provider = 'tmdb'

	def _search(self, term: str, page: int) -> RawPage:
		params = {
			'api_key': self.settings.api_key,
			'query': term,
			'page': page,
			'include_adult': 'false',
		}
		payload = self._get_json(f"{self.settings.base_url}/search/movie", params)
		return RawPage(
			records=self._records(payload.get('results')),
			total_results=self._parse_total(payload.get('total_results')),
		)

	def _detail(self, movie_id: MovieId) -> Dict[str, Any]:
		params = {
			'api_key': self.settings.api_key,
			'append_to_response': 'credits',
		}
		return self._get_json(f"{self.settings.base_url}/movie/{movie_id}", params)


def create_fetcher(settings: Settings, session: Optional[requests.Session] = None) -> MovieFetcher:
	"""Pick the fetcher implementation for the configured provider."""
	if settings.provider == 'tmdb':
		return TmdbFetcher(settings, session=session)
	return OmdbFetcher(settings, session=session)
