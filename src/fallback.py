"""
Fallback policy.
Wraps provider-backed operations so callers always receive usable data:
any provider failure is logged with its category and replaced by a built-in sample list.
"""

from typing import Callable, Optional, TypeVar  # type hints

from loguru import logger  # console logging

from .errors import (
	AllQueriesFailed,
	MovieNotFound,
	ProviderError,
	ProviderHTTPError,
	ProviderTimeout,
	ProviderTransportError,
)
from .models import Movie, MovieId, MovieResults  # result structures


T = TypeVar('T')

# Built-in sample movies shown whenever the provider cannot be reached
SAMPLE_MOVIES = (
	Movie(
		id='tt0137523',
		title='Fight Club',
		year='1999',
		poster_url='https://m.media-amazon.com/images/M/MV5BNDIzNDU0YzEtYzE5Ni00ZjlkLTk5ZjgtNjM3NWE4YzA3Nzk3XkEyXkFqcGdeQXVyMjUzOTY1NTc@._V1_SX300.jpg',
		plot='An insomniac office worker and a devil-may-care soap maker form an underground fight club that evolves into an anarchist organization.',
		rating=8.8,
		genre='Drama',
		director='David Fincher',
		actors='Brad Pitt, Edward Norton, Meat Loaf',
		runtime='139 min',
	),
	Movie(
		id='tt0109830',
		title='Forrest Gump',
		year='1994',
		poster_url='https://m.media-amazon.com/images/M/MV5BNWIwODRlZTUtY2U3ZS00Yzg1LWJhNzYtMmZiYmEyNmU1NjMzXkEyXkFqcGdeQXVyMTQxNzMzNDI@._V1_SX300.jpg',
		plot='The presidencies of Kennedy and Johnson, the Vietnam War, the Watergate scandal and other historical events unfold from the perspective of an Alabama man.',
		rating=8.8,
		genre='Drama, Romance',
		director='Robert Zemeckis',
		actors='Tom Hanks, Robin Wright, Gary Sinise',
		runtime='142 min',
	),
	Movie(
		id='tt0111161',
		title='The Shawshank Redemption',
		year='1994',
		poster_url='https://m.media-amazon.com/images/M/MV5BNDE3ODcxYzMtY2YzZC00NmNlLWJiNDMtZDViZWM2MzIxZDYwXkEyXkFqcGdeQXVyNjAwNDUxODI@._V1_SX300.jpg',
		plot='Two imprisoned men bond over a number of years, finding solace and eventual redemption through acts of common decency.',
		rating=9.3,
		genre='Drama',
		director='Frank Darabont',
		actors='Tim Robbins, Morgan Freeman, Bob Gunton',
		runtime='142 min',
	),
	Movie(
		id='tt0068646',
		title='The Godfather',
		year='1972',
		poster_url='https://m.media-amazon.com/images/M/MV5BM2MyNjYxNmUtYTAwNi00MTYxLWJmNWYtYzZlODY3ZTk3OTFlXkEyXkFqcGdeQXVyNzkwMjQ5NzM@._V1_SX300.jpg',
		plot="An organized crime dynasty's aging patriarch transfers control of his clandestine empire to his reluctant son.",
		rating=9.2,
		genre='Crime, Drama',
		director='Francis Ford Coppola',
		actors='Marlon Brando, Al Pacino, James Caan',
		runtime='175 min',
	),
	Movie(
		id='tt0816692',
		title='Interstellar',
		year='2014',
		poster_url='https://m.media-amazon.com/images/M/MV5BZjdkOTU3MDktN2IxOS00OGEyLWFmMjktY2FiMmZkNWIyODZiXkEyXkFqcGdeQXVyMTMxODk2OTU@._V1_SX300.jpg',
		plot="A team of explorers travel through a wormhole in space in an attempt to ensure humanity's survival.",
		rating=8.6,
		genre='Adventure, Drama, Sci-Fi',
		director='Christopher Nolan',
		actors='Matthew McConaughey, Anne Hathaway, Jessica Chastain',
		runtime='169 min',
	),
	Movie(
		id='tt1375666',
		title='Inception',
		year='2010',
		poster_url='https://m.media-amazon.com/images/M/MV5BMjAxMzY3NjcxNF5BMl5BanBnXkFtZTcwNTI5OTM0Mw@@._V1_SX300.jpg',
		plot="A thief who steals corporate secrets through the use of dream-sharing technology is given the inverse task of planting an idea into a CEO's mind.",
		rating=8.8,
		genre='Action, Sci-Fi, Thriller',
		director='Christopher Nolan',
		actors='Leonardo DiCaprio, Marion Cotillard, Tom Hardy',
		runtime='148 min',
	),
)

# Diagnostic messages per error category (logging only, behavior is identical)
ERROR_MESSAGES = {
	'invalid_api_key': 'API key is invalid, check the configuration.',
	'not_found': 'Requested data was not found.',
	'rate_limited': 'API request limit reached, try again later.',
	'server_error': 'Provider server error, try again later.',
	'http_error': 'Provider returned an unexpected status code.',
	'timeout': 'Provider did not answer in time.',
	'transport_error': 'Could not reach the provider.',
	'unexpected': 'Unexpected error while fetching movies.',
}


def sample_results() -> MovieResults:
	"""Fresh copy of the sample result set (callers may mutate their list)."""
	movies = list(SAMPLE_MOVIES)
	return MovieResults(movies=movies, total_results=len(movies))


def sample_movie(movie_id: MovieId) -> Optional[Movie]:
	"""Sample movie with the given id, if there is one."""
	for movie in SAMPLE_MOVIES:
		if movie.id == movie_id:
			return movie
	return None


def classify_error(exc: BaseException) -> str:
	"""Diagnostic category for a provider failure."""
	if isinstance(exc, AllQueriesFailed) and exc.errors:
		return classify_error(exc.errors[0])
	if isinstance(exc, ProviderHTTPError):
		code = exc.status_code
		if code == 401:
			return 'invalid_api_key'
		if code == 404:
			return 'not_found'
		if code == 429:
			return 'rate_limited'
		if 500 <= code < 600:
			return 'server_error'
		return 'http_error'
	if isinstance(exc, MovieNotFound):
		return 'not_found'
	if isinstance(exc, ProviderTimeout):
		return 'timeout'
	if isinstance(exc, ProviderTransportError):
		return 'transport_error'
	return 'unexpected'


class FallbackPolicy:
	"""
	Executes a provider-backed operation once; on ProviderError it logs the failure
	category and returns the fallback value instead of raising.
	"""

	def run(self, label: str, operation: Callable[..., T], *args, fallback: Optional[Callable[[], T]] = None, **kwargs) -> T:
		"""
		Call `operation(*args, **kwargs)`.
		On failure return `fallback()` (default: the sample result set).
		"""
		logger.debug(f"[Fallback] {label}: fetching")
		try:
			result = operation(*args, **kwargs)
		except ProviderError as e:
			kind = classify_error(e)
			logger.warning(f"[Fallback] {label} failed ({kind}): {ERROR_MESSAGES[kind]} {e}")
			logger.info(f"[Fallback] {label}: using sample data as fallback")
			return fallback() if fallback is not None else sample_results()
		logger.debug(f"[Fallback] {label}: success")
		return result
