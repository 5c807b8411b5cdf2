"""
Aggregation module.
Turns one category / trending / search request into provider queries, runs them in parallel,
and merges the normalized results into a single deduplicated list.
"""

from concurrent.futures import ThreadPoolExecutor  # parallel per-term fetches
from dataclasses import dataclass, field  # per-term outcome container
from typing import Iterable, List, Optional  # type hints

from loguru import logger  # console logging

from .categories import TRENDING_TERMS, resolve_terms  # category -> terms lookup
from .config import Settings  # caps and cutoffs
from .errors import AllQueriesFailed, MovieNotFound, ProviderError  # failure handling
from .fetcher import MovieFetcher  # single-query fetcher
from .models import Movie, MovieId, MovieResults  # result structures
from .normalizer import MovieNormalizer  # raw record -> Movie


@dataclass
class TermResult:
	term: str  # query term
	movies: List[Movie] = field(default_factory=list)  # normalized movies in provider order
	error: Optional[ProviderError] = None  # set when the fetch failed


def deduplicate(movies: Iterable[Movie]) -> List[Movie]:
	"""Drop movies whose id was already seen; the first occurrence wins and order is kept."""
	seen = set()
	unique = []
	for movie in movies:
		if movie.id in seen:
			continue
		seen.add(movie.id)
		unique.append(movie)
	return unique


class Aggregator:
	"""
	Runs the fetch -> normalize -> merge pipeline for categories, trending and search.
	Failures of individual terms become empty sub-results; only when every term fails
	does the request raise (AllQueriesFailed) so the fallback policy can take over.
	"""

	def __init__(self, fetcher: MovieFetcher, normalizer: MovieNormalizer, settings: Settings):
		self.fetcher = fetcher  # issues provider queries
		self.normalizer = normalizer  # maps raw records
		self.settings = settings  # caps, cutoffs, worker bound

	def by_category(self, category_id: str) -> MovieResults:
		"""Merged, deduplicated and capped movies for a category."""
		terms = resolve_terms(category_id)
		logger.info(f"[Aggregator] Category '{category_id}' -> terms={terms}")

		sub_results = self._fetch_terms(terms)
		merged = [movie for result in sub_results for movie in result.movies]
		unique = deduplicate(merged)[:self.settings.category_cap]

		logger.info(f"[Aggregator] Category '{category_id}' merged {len(merged)} -> {len(unique)} movies")
		# Multiple queries are merged, so the total is the number of items returned
		return MovieResults(movies=unique, total_results=len(unique))

	def trending(self) -> MovieResults:
		"""Top few movies of each trending term, deduplicated."""
		sub_results = self._fetch_terms(TRENDING_TERMS)
		per_term = self.settings.trending_per_term
		merged = [movie for result in sub_results for movie in result.movies[:per_term]]
		unique = deduplicate(merged)

		logger.info(f"[Aggregator] Trending merged {len(merged)} -> {len(unique)} movies")
		return MovieResults(movies=unique, total_results=len(unique))

	def search(self, query: str, page: int = 1) -> MovieResults:
		"""
		Single-term search. Blank queries return an empty result without a network call.
		Provider errors propagate to the caller.
		"""
		if not query or not query.strip():
			logger.debug("[Aggregator] Empty search query, skipping provider call")
			return MovieResults(movies=[], total_results=0)

		raw = self.fetcher.fetch(query.strip(), page)
		movies = self.normalizer.normalize_all(raw.records)
		logger.info(f"[Aggregator] Search '{query.strip()}' page={page} -> {len(movies)} of {raw.total_results}")
		return MovieResults(movies=movies, total_results=raw.total_results)

	def detail(self, movie_id: MovieId) -> Movie:
		"""Full record for one movie. Provider errors propagate to the caller."""
		record = self.fetcher.fetch_detail(movie_id)
		if not self.normalizer.has_identity(record):
			raise MovieNotFound(movie_id, "detail record carries no id")
		return self.normalizer.normalize(record)

	def _fetch_terms(self, terms: List[str]) -> List[TermResult]:
		"""
		Fetch every term in parallel and wait for all of them.
		Results come back in term order regardless of completion order.
		"""
		workers = max(1, min(len(terms), self.settings.max_workers))
		with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='movie-fetch') as pool:
			results = list(pool.map(self._fetch_term, terms))

		failed = [r for r in results if r.error is not None]
		if terms and len(failed) == len(terms):
			raise AllQueriesFailed(terms, [r.error for r in failed])
		return results

	def _fetch_term(self, term: str) -> TermResult:
		"""Fetch and normalize one term; a provider failure becomes an empty sub-result."""
		try:
			raw = self.fetcher.fetch(term)
		except ProviderError as e:
			logger.warning(f"[Aggregator] Term '{term}' failed: {e}")
			return TermResult(term=term, error=e)

		movies = self.normalizer.normalize_all(raw.records, apply_year_filter=True)
		logger.debug(f"[Aggregator] Term '{term}' -> {len(raw.records)} records, {len(movies)} kept")
		return TermResult(term=term, movies=movies)
