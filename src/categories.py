"""
Category lookup.
Resolves a category id to the ordered list of provider search terms that make it up.
"""

from typing import Dict, List, Optional  # type hints

from rapidfuzz import process, fuzz  # fuzzy matching for near-miss category ids

from loguru import logger  # console logging


# Category id -> ordered search terms (term order decides merge order)
CATEGORY_TERMS: Dict[str, List[str]] = {
	'popular': ['Marvel', 'Batman', 'action', 'adventure'],
	'top_rated': ['Godfather', 'Shawshank', 'Lord of the Rings', 'Inception'],
	'upcoming': ['2024', '2023', 'recent'],
	'now_playing': ['2024', '2023'],
	'comedy': ['comedy', 'funny', 'laugh'],
	'drama': ['drama', 'story', 'life'],
	'thriller': ['thriller', 'suspense', 'mystery'],
	'horror': ['horror', 'scary', 'fear'],
}

# Used when the category id is not mapped at all
FALLBACK_TERMS: List[str] = ['movie']

# Terms whose top results make up the trending list
TRENDING_TERMS: List[str] = ['Marvel', 'Batman', 'Star Wars', 'Harry Potter']

# Categories offered by the display layer: (id, label)
MENU_CATEGORIES = [
	('popular', 'Populer'),
	('top_rated', 'Rating Tinggi'),
	('action', 'Action'),
	('comedy', 'Comedy'),
	('drama', 'Drama'),
	('thriller', 'Thriller'),
]

FUZZY_CUTOFF = 90  # minimum similarity for a near-miss id to count as a match


def canonical_category(category_id: Optional[str]) -> Optional[str]:
	"""
	Map a user-supplied category id onto a key of CATEGORY_TERMS, or None.
	Accepts case / separator variants ("Top Rated", "top-rated") and close misspellings.
	"""
	if not category_id:
		return None
	if category_id in CATEGORY_TERMS:
		return category_id

	key = category_id.strip().lower().replace('-', '_').replace(' ', '_')
	if key in CATEGORY_TERMS:
		return key

	match = process.extractOne(key, list(CATEGORY_TERMS.keys()), scorer=fuzz.ratio, score_cutoff=FUZZY_CUTOFF)
	if match:
		logger.debug(f"[Categories] Fuzzy matched '{category_id}' -> '{match[0]}' (score={match[1]:.1f})")
		return match[0]
	return None


def resolve_terms(category_id: Optional[str]) -> List[str]:
	"""Ordered search terms for a category; unknown categories fall back to a generic term."""
	key = canonical_category(category_id)
	if key is None:
		logger.debug(f"[Categories] Unmapped category '{category_id}', using {FALLBACK_TERMS}")
		return list(FALLBACK_TERMS)
	return list(CATEGORY_TERMS[key])
