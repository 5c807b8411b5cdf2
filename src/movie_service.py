"""
Movie service.
Entry point used by the display layer (API server, Streamlit page, scripts): wires the
fetcher, normalizer and aggregator together and guards every call with the fallback policy,
so no provider error ever reaches the caller.
"""

from typing import Optional  # type hints

import requests  # shared HTTP session
from loguru import logger  # console logging

from .aggregator import Aggregator  # fetch/merge pipeline
from .config import Settings  # provider configuration
from .errors import ProviderError  # connection check failures
from .fallback import FallbackPolicy, sample_movie  # sample-data substitution
from .fetcher import create_fetcher  # provider-specific fetcher
from .models import Movie, MovieId, MovieResults  # result structures
from .normalizer import create_normalizer, format_rating, resolve_poster  # record mapping + display helpers


# Well-known movie used to check the provider (The Shawshank Redemption)
CONNECTION_CHECK_IDS = {'omdb': 'tt0111161', 'tmdb': 278}


class MovieService:
	"""
	High-level movie API: search, categories, trending, detail and a connection check.
	"""

	def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
		self.settings = settings  # read-only configuration
		self.fetcher = create_fetcher(settings, session=session)  # provider queries
		self.normalizer = create_normalizer(settings)  # raw -> Movie
		self.aggregator = Aggregator(self.fetcher, self.normalizer, settings)  # pipeline
		self.fallback = FallbackPolicy()  # sample-data guard
		logger.info(f"[Service] Movie service ready (provider={settings.provider})")

	def search_movies(self, query: str, page: int = 1) -> MovieResults:
		"""Search by free text; blank queries yield an empty result without a provider call."""
		if not query or not query.strip():
			return MovieResults(movies=[], total_results=0)
		return self.fallback.run(f"search '{query.strip()}'", self.aggregator.search, query, page)

	def movies_by_category(self, category_id: str) -> MovieResults:
		"""Merged movies for a category id (e.g. 'popular', 'top_rated')."""
		return self.fallback.run(f"category '{category_id}'", self.aggregator.by_category, category_id)

	def trending_movies(self) -> MovieResults:
		"""Top results of the trending terms."""
		return self.fallback.run('trending', self.aggregator.trending)

	def movie_detail(self, movie_id: MovieId) -> Optional[Movie]:
		"""
		Full details for one movie.
		When the provider fails, the matching sample movie is returned (or None if there is none).
		"""
		return self.fallback.run(
			f"detail '{movie_id}'",
			self.aggregator.detail,
			movie_id,
			fallback=lambda: sample_movie(movie_id),
		)

	def check_api_connection(self) -> bool:
		"""True if a known movie can be fetched from the provider; never raises."""
		check_id = CONNECTION_CHECK_IDS[self.settings.provider]
		try:
			self.fetcher.fetch_detail(check_id)
		except ProviderError as e:
			logger.warning(f"[Service] Provider connection check failed: {e}")
			return False
		logger.info("[Service] Provider connection OK")
		return True

	def image_url(self, poster_url: Optional[str]) -> str:
		"""Poster URL safe to render (placeholder when missing or broken)."""
		return resolve_poster(poster_url, self.settings.placeholder_image)

	@staticmethod
	def format_rating(rating: float) -> str:
		return format_rating(rating)
