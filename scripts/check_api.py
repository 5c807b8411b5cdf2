"""
Check the movie provider connection from the console.

This script:
1) Reads the provider configuration from the environment (.env supported)
2) Checks the provider with a known movie
3) Loads one category and the trending list
4) Prints a short summary (sample data is used if the provider is down)

Usage:
    python -m scripts.check_api [category]
"""

import sys  # command-line arguments
import time  # measure step timings

from loguru import logger  # console logging

from src.config import Settings  # environment settings
from src.movie_service import MovieService  # movie pipeline
from src.normalizer import format_rating  # rating display


def main(category: str = 'popular'):
	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Movie Provider Check")
	logger.info("=" * 60)

	# 1) Configuration
	logger.info("[1/3] Reading configuration...")
	service = MovieService(Settings.from_env())  # raises ConfigError on missing key
	logger.info(f"[OK] Provider: {service.settings.provider} ({service.settings.base_url})")

	# 2) Connection check
	logger.info("\n[2/3] Probing provider...")
	if service.check_api_connection():
		logger.info("[OK] Connected; live data available")
	else:
		logger.warning("[!!] Provider unreachable; results below are sample data")

	# 3) Category and trending
	logger.info(f"\n[3/3] Loading category '{category}' and trending...")
	t0 = time.time()  # start timer
	for label, results in (
		(f"category '{category}'", service.movies_by_category(category)),
		("trending", service.trending_movies()),
	):
		logger.info(f"{label}: {results.total_results} movies")
		for m in results.movies[:5]:
			logger.info(f"  - {m.title} ({m.year}) ⭐ {format_rating(m.rating)}")
	logger.info(f"[OK] Loaded in {time.time() - t0:.2f}s")

	# Footer
	logger.info("=" * 60)


if __name__ == '__main__':
	main(*sys.argv[1:2])  # optional category id
