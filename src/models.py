"""
Data models for the Movie Catalog.
Defines the core data structures passed between the fetcher, normalizer, aggregator and display layer.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field, asdict  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Union  # lists, dicts and provider-dependent ids


# OMDb identifies movies by IMDb id strings, TMDb by integers
MovieId = Union[str, int]


@dataclass
class Movie:
	"""
	A single movie in the internal (normalized) representation.
	Every field is filled: missing provider data is replaced by a sentinel value.
	"""
	id: MovieId  # provider identifier (never empty)
	title: str  # display title
	year: str  # release year as reported by the provider, or "Unknown"
	poster_url: str  # real poster URL or the configured placeholder
	plot: str = 'Plot tidak tersedia.'  # synopsis or localized default
	rating: float = 0.0  # 0..10 rating, 0 means "no rating"
	genre: str = 'Unknown'  # comma-separated genre names
	director: str = 'Unknown'  # director name(s)
	actors: str = 'Unknown'  # comma-separated cast names
	runtime: str = 'N/A'  # e.g. "148 min"
	type: str = 'movie'  # provider media type

	def to_dict(self) -> Dict[str, Any]:
		"""Plain dict for JSON responses and UI rendering."""
		return asdict(self)


@dataclass
class MovieResults:
	"""
	Ordered list of movies handed to the display layer plus a total-count figure.
	"""
	movies: List[Movie] = field(default_factory=list)  # insertion order = aggregation order
	total_results: int = 0  # provider total for search, item count for aggregations

	def __len__(self) -> int:
		return len(self.movies)


@dataclass
class RawPage:
	"""One page of raw provider records as returned by a single fetch."""
	records: List[Dict[str, Any]] = field(default_factory=list)  # undecoded provider records
	total_results: int = 0  # provider-reported total across all pages
