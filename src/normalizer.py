"""
Normalization module.
Maps raw provider records into the internal Movie representation, filling every
missing or unusable field with a sentinel value so the display layer never has to check.
"""

import re  # leading-year extraction
from typing import Any, Dict, Iterable, List, Optional  # type hints

from loguru import logger  # console logging

from .config import Settings  # placeholder / image base configuration
from .models import Movie  # normalized movie record


# Localized defaults shown when the provider omits a descriptive field
DEFAULT_PLOT = 'Plot tidak tersedia.'
DEFAULT_TEXT = 'Unknown'
DEFAULT_RUNTIME = 'N/A'
DEFAULT_YEAR = 'Unknown'

NOT_AVAILABLE = 'N/A'  # provider sentinel for "no value"
BROKEN_POSTER_MARKER = '@@'  # provider-specific broken thumbnail marker

RE_LEADING_YEAR = re.compile(r"^\s*(\d{4})")  # "2012", "2012–2014", "2012-05-04"


def resolve_poster(url: Optional[str], placeholder: str) -> str:
	"""Return `url` when usable, otherwise the placeholder image."""
	if not isinstance(url, str) or not url or url == NOT_AVAILABLE or BROKEN_POSTER_MARKER in url:
		return placeholder
	return url


def parse_rating(value: Any) -> float:
	"""Parse a rating as float; 0.0 (no rating) when absent or unparseable."""
	if value is None or value == NOT_AVAILABLE:
		return 0.0
	try:
		return float(value)
	except (TypeError, ValueError):
		return 0.0


def parse_year(value: Any) -> Optional[int]:
	"""Leading four-digit year of `value`, or None."""
	if isinstance(value, int):
		return value
	if not value:
		return None
	m = RE_LEADING_YEAR.match(str(value))
	return int(m.group(1)) if m else None


def format_rating(rating: float) -> str:
	"""Display string for a rating: 'N/A' for the no-rating sentinel, else one decimal."""
	if not rating:
		return NOT_AVAILABLE
	return f"{rating:.1f}"


def release_year(year: Optional[str]) -> str:
	return year or DEFAULT_YEAR


def _text(value: Any, default: str) -> str:
	"""Trimmed text or `default` when missing / provider sentinel."""
	if value is None:
		return default
	value = str(value).strip()
	if not value or value == NOT_AVAILABLE:
		return default
	return value


class MovieNormalizer:
	"""
	Base normalizer. Subclasses implement `normalize` and `raw_year` for one provider.
	"""

	id_field = 'id'  # raw key carrying the provider identifier

	def __init__(self, settings: Settings):
		self.placeholder = settings.placeholder_image  # fallback poster
		self.min_year = settings.min_year  # content policy cutoff

	def normalize(self, record: Dict[str, Any]) -> Movie:
		raise NotImplementedError

	def raw_year(self, record: Dict[str, Any]) -> Optional[int]:
		raise NotImplementedError

	def has_identity(self, record: Dict[str, Any]) -> bool:
		"""True if the record carries a non-empty identifier."""
		value = record.get(self.id_field)
		return value is not None and str(value).strip() != ''

	def passes_year_filter(self, record: Dict[str, Any], min_year: Optional[int] = None) -> bool:
		"""
		Content policy: keep only records released in or after `min_year`.
		Records whose year cannot be parsed are excluded.
		"""
		cutoff = self.min_year if min_year is None else min_year
		year = self.raw_year(record)
		return year is not None and year >= cutoff

	def normalize_all(self, records: Iterable[Dict[str, Any]], apply_year_filter: bool = False) -> List[Movie]:
		"""Normalize records in provider order, dropping those without an id (and, optionally, old ones)."""
		movies = []
		for record in records:
			if not self.has_identity(record):
				logger.warning(f"[Normalizer] Skipping record without id: {record.get('Title') or record.get('title')}")
				continue
			if apply_year_filter and not self.passes_year_filter(record):
				logger.debug(f"[Normalizer] Filtered out by year | record={self.raw_year(record)} cutoff={self.min_year}")
				continue
			movies.append(self.normalize(record))
		return movies


class OmdbNormalizer(MovieNormalizer):
	"""Maps OMDb search and detail records (capitalized keys, string values)."""

	id_field = 'imdbID'

	def normalize(self, record: Dict[str, Any]) -> Movie:
		return Movie(
			id=str(record['imdbID']).strip(),
			title=_text(record.get('Title'), DEFAULT_TEXT),
			year=release_year(_text(record.get('Year'), '')),
			poster_url=resolve_poster(record.get('Poster'), self.placeholder),
			plot=_text(record.get('Plot'), DEFAULT_PLOT),
			rating=parse_rating(record.get('imdbRating')),
			genre=_text(record.get('Genre'), DEFAULT_TEXT),
			director=_text(record.get('Director'), DEFAULT_TEXT),
			actors=_text(record.get('Actors'), DEFAULT_TEXT),
			runtime=_text(record.get('Runtime'), DEFAULT_RUNTIME),
			type=_text(record.get('Type'), 'movie'),
		)

	def raw_year(self, record: Dict[str, Any]) -> Optional[int]:
		return parse_year(record.get('Year'))


class TmdbNormalizer(MovieNormalizer):
	"""
	Maps TMDb search and detail records.
	Posters arrive as relative paths and are joined to the configured image base URL;
	detail records also carry genres, runtime and credits.
	"""

	id_field = 'id'

	def __init__(self, settings: Settings):
		super().__init__(settings)
		self.image_base_url = settings.image_base_url.rstrip('/')  # e.g. https://image.tmdb.org/t/p/w500

	def normalize(self, record: Dict[str, Any]) -> Movie:
		return Movie(
			id=record['id'],
			title=_text(record.get('title') or record.get('original_title'), DEFAULT_TEXT),
			year=release_year(str(self.raw_year(record) or '')),
			poster_url=resolve_poster(self.image_url(record.get('poster_path')), self.placeholder),
			plot=_text(record.get('overview'), DEFAULT_PLOT),
			rating=parse_rating(record.get('vote_average')),
			genre=self._genres(record),
			director=self._director(record),
			actors=self._actors(record),
			runtime=f"{record['runtime']} min" if record.get('runtime') else DEFAULT_RUNTIME,
			type='movie',
		)

	def raw_year(self, record: Dict[str, Any]) -> Optional[int]:
		return parse_year(record.get('release_date'))

	def image_url(self, path: Optional[str]) -> Optional[str]:
		"""Join a relative poster path to the image base URL; absolute URLs pass through."""
		if not isinstance(path, str) or not path:
			return None
		if path.startswith('http'):
			return path
		return f"{self.image_base_url}/{path.lstrip('/')}"

	@staticmethod
	def _genres(record: Dict[str, Any]) -> str:
		names = [g.get('name') for g in record.get('genres') or [] if g.get('name')]
		return ', '.join(names) if names else DEFAULT_TEXT

	@staticmethod
	def _director(record: Dict[str, Any]) -> str:
		crew = (record.get('credits') or {}).get('crew') or []
		names = [c.get('name') for c in crew if c.get('job') == 'Director' and c.get('name')]
		return ', '.join(names) if names else DEFAULT_TEXT

	@staticmethod
	def _actors(record: Dict[str, Any]) -> str:
		cast = (record.get('credits') or {}).get('cast') or []
		names = [c.get('name') for c in cast[:3] if c.get('name')]
		return ', '.join(names) if names else DEFAULT_TEXT


def create_normalizer(settings: Settings) -> MovieNormalizer:
	"""Pick the normalizer implementation for the configured provider."""
	if settings.provider == 'tmdb':
		return TmdbNormalizer(settings)
	return OmdbNormalizer(settings)
