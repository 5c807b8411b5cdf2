"""
Error taxonomy for provider calls.
Every failure the fetcher can produce is a ProviderError subclass so the fallback
policy can intercept them with a single except clause.
"""

from typing import Optional


class ConfigError(RuntimeError):
	"""Raised at startup when required configuration (e.g. the API key) is missing."""


class ProviderError(Exception):
	"""Base class for anything that went wrong while talking to the movie provider."""


class ProviderTimeout(ProviderError):
	"""The request did not complete within the fixed timeout."""


class ProviderTransportError(ProviderError):
	"""Network unreachable, DNS failure, connection reset, malformed body..."""


class ProviderHTTPError(ProviderError):
	"""The provider answered with a non-success status code."""

	def __init__(self, status_code: int, message: Optional[str] = None):
		self.status_code = status_code
		super().__init__(message or f"Provider returned HTTP {status_code}")


class MovieNotFound(ProviderError):
	"""A detail lookup returned no movie for the requested id."""

	def __init__(self, movie_id, message: Optional[str] = None):
		self.movie_id = movie_id
		super().__init__(message or f"Movie not found: {movie_id}")


class AllQueriesFailed(ProviderError):
	"""Every underlying query of a multi-term aggregation failed."""

	def __init__(self, terms, errors):
		self.terms = list(terms)
		self.errors = list(errors)
		super().__init__(f"All {len(self.terms)} queries failed: {', '.join(self.terms)}")
