"""
Configuration for the Movie Catalog.
Settings are read once at process start (environment variables, optionally from a .env file)
and never mutated afterwards.
"""

import os  # environment access
from dataclasses import dataclass  # immutable settings record
from pathlib import Path  # locate the .env file
from typing import Optional  # optional overrides

from dotenv import load_dotenv  # populate os.environ from .env
from loguru import logger  # console logging

from .errors import ConfigError  # raised on missing API key


PROVIDERS = ('omdb', 'tmdb')  # supported provider variants

DEFAULT_OMDB_BASE_URL = 'https://www.omdbapi.com/'
DEFAULT_TMDB_BASE_URL = 'https://api.themoviedb.org/3'
DEFAULT_TMDB_IMAGE_BASE_URL = 'https://image.tmdb.org/t/p/w500'
DEFAULT_PLACEHOLDER_IMAGE = 'https://placehold.co/300x450?text=No+Poster'


@dataclass(frozen=True)
class Settings:
	"""
	Read-only configuration shared by the fetcher, normalizer and aggregator.
	"""
	api_key: str  # provider API key
	provider: str = 'omdb'  # 'omdb' or 'tmdb'
	base_url: str = DEFAULT_OMDB_BASE_URL  # provider REST endpoint
	image_base_url: str = ''  # prefix for relative poster paths (TMDb only)
	placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE  # used whenever a poster is unusable
	request_timeout: float = 10.0  # seconds per outbound call
	min_year: int = 2000  # content policy cutoff for category/trending aggregation
	category_cap: int = 20  # maximum items in a category result
	trending_per_term: int = 3  # items taken from each trending term
	max_workers: int = 8  # upper bound on parallel term fetches

	def __post_init__(self):
		if self.provider not in PROVIDERS:
			raise ConfigError(f"Unknown provider '{self.provider}', expected one of {PROVIDERS}")
		if not self.api_key:
			raise ConfigError(f"Missing API key for provider '{self.provider}'")

	@classmethod
	def from_env(cls, env_file: Optional[str] = None, provider: Optional[str] = None) -> 'Settings':
		"""
		Build settings from environment variables.
		A .env file (default: ./.env) is loaded first; real environment variables win.
		"""
		env_path = Path(env_file) if env_file else Path.cwd() / '.env'
		if env_path.exists():
			load_dotenv(env_path)  # does not override variables already set
			logger.debug(f"[Config] Loaded environment from {env_path}")

		provider = (provider or os.getenv('MOVIE_PROVIDER') or 'omdb').strip().lower()
		placeholder = os.getenv('PLACEHOLDER_IMAGE_URL') or DEFAULT_PLACEHOLDER_IMAGE

		if provider == 'tmdb':
			settings = cls(
				api_key=os.getenv('TMDB_API_KEY', ''),
				provider='tmdb',
				base_url=os.getenv('TMDB_BASE_URL') or DEFAULT_TMDB_BASE_URL,
				image_base_url=os.getenv('TMDB_IMAGE_BASE_URL') or DEFAULT_TMDB_IMAGE_BASE_URL,
				placeholder_image=placeholder,
			)
		else:
			settings = cls(
				api_key=os.getenv('OMDB_API_KEY', ''),
				provider=provider,
				base_url=os.getenv('OMDB_BASE_URL') or DEFAULT_OMDB_BASE_URL,
				placeholder_image=placeholder,
			)

		logger.info(f"[Config] Provider={settings.provider} base_url={settings.base_url}")
		return settings
