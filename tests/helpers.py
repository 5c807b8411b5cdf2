"""
Shared test helpers: assertions, a fake requests session, raw provider record builders
and an isolated environment for settings tests.
"""

import os
import sys
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from src.config import Settings

PLACEHOLDER = 'https://placehold.co/300x450?text=No+Poster'

ENV_VARS = (
	'MOVIE_PROVIDER', 'OMDB_API_KEY', 'OMDB_BASE_URL', 'TMDB_API_KEY',
	'TMDB_BASE_URL', 'TMDB_IMAGE_BASE_URL', 'PLACEHOLDER_IMAGE_URL',
)


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_raises(exc_type, fn, msg):
	"""Call `fn` and return the raised `exc_type` instance; fail if nothing is raised."""
	try:
		fn()
	except exc_type as e:
		return e
	raise AssertionError(f"{msg} | expected {exc_type.__name__}")


def omdb_settings(**overrides):
	values = dict(api_key='test-key', provider='omdb', base_url='https://omdb.test/', placeholder_image=PLACEHOLDER)
	values.update(overrides)
	return Settings(**values)


def tmdb_settings(**overrides):
	values = dict(
		api_key='test-key',
		provider='tmdb',
		base_url='https://tmdb.test/3',
		image_base_url='https://image.tmdb.test/t/p/w500',
		placeholder_image=PLACEHOLDER,
	)
	values.update(overrides)
	return Settings(**values)


class FakeResponse:
	"""Minimal stand-in for requests.Response."""

	def __init__(self, status_code=200, payload=None):
		self.status_code = status_code
		self.payload = payload

	@property
	def ok(self):
		return 200 <= self.status_code < 400

	def json(self):
		if self.payload is None:
			raise ValueError("No JSON object could be decoded")
		return self.payload


class FakeSession:
	"""
	Stand-in for requests.Session.
	`handler(url, params)` returns a FakeResponse or raises (e.g. requests.Timeout).
	Every call is recorded in `calls` as (url, params, timeout).
	"""

	def __init__(self, handler):
		self.handler = handler
		self.calls = []
		self._lock = threading.Lock()

	def get(self, url, params=None, timeout=None):
		with self._lock:
			self.calls.append((url, dict(params or {}), timeout))
		return self.handler(url, params or {})

	def terms(self):
		"""Search terms requested so far (OMDb 's' or TMDb 'query')."""
		return [p.get('s') or p.get('query') for _, p, _ in self.calls]


def omdb_record(imdb_id, title='Movie', year='2010', poster='https://img.test/poster.jpg', **extra):
	record = {'imdbID': imdb_id, 'Title': title, 'Year': year, 'Type': 'movie', 'Poster': poster}
	record.update(extra)
	return record


def omdb_page(records, total=None):
	if not records:
		return {'Response': 'False', 'Error': 'Movie not found!'}
	return {'Response': 'True', 'Search': records, 'totalResults': str(total if total is not None else len(records))}


def omdb_search_handler(pages, errors=None):
	"""
	Handler serving OMDb search pages by term.
	`pages`: term -> list of records; `errors`: term -> exception instance or HTTP status.
	"""
	errors = errors or {}

	def handler(url, params):
		term = params.get('s')
		if term in errors:
			err = errors[term]
			if isinstance(err, int):
				return FakeResponse(err, {'Response': 'False', 'Error': 'error'})
			raise err
		return FakeResponse(200, omdb_page(pages.get(term, [])))

	return handler


def unique_records(prefix, count, year='2010'):
	"""`count` OMDb records with ids prefix-0..prefix-(count-1)."""
	return [omdb_record(f"{prefix}-{i}", title=f"{prefix} {i}", year=year) for i in range(count)]


@contextmanager
def clean_env(**values):
	"""
	Run with the movie settings variables unset (then set to `values`) inside an empty
	working directory, so no stray .env is picked up. Everything is restored on exit.
	"""
	saved = {name: os.environ.get(name) for name in ENV_VARS}
	cwd = os.getcwd()
	with tempfile.TemporaryDirectory() as tmp:
		try:
			for name in ENV_VARS:
				os.environ.pop(name, None)
			os.environ.update(values)
			os.chdir(tmp)
			yield Path(tmp)
		finally:
			os.chdir(cwd)
			for name, value in saved.items():
				if value is None:
					os.environ.pop(name, None)
				else:
					os.environ[name] = value
