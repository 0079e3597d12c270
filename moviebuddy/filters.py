"""
Filter engine.
Pure functions that select and order catalog entries from free text and structured filters.
Nothing here suspends or mutates the catalog.
"""

import random  # uniform pick for "surprise me"
from typing import Callable, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .lexicons import get_mood_genres  # mood → genre table
from .models import Movie, SearchFilters, parse_release_year  # catalog record, filter request, year parsing


def _text_matches(movie: Movie, needle: str) -> bool:
	# needle is already lower-cased; any field containing it is a hit
	return (
		needle in movie.title.lower() or
		needle in movie.director.lower() or
		needle in movie.cast.lower() or
		needle in movie.genres.lower() or
		needle in movie.overview.lower()
	)


def _decade_bounds(decade: str) -> Optional[tuple]:
	# leading digits only, so "1990s" reads as 1990 the same way release dates do
	start = parse_release_year(str(decade))
	if start is None:
		return None
	return start, start + 9


def _build_predicates(filters: SearchFilters) -> List[Callable[[Movie], bool]]:
	"""Turn each populated filter field into an independent predicate."""
	predicates: List[Callable[[Movie], bool]] = []

	if filters.genre:
		genre = filters.genre.lower()
		predicates.append(lambda m: genre in m.genres.lower())

	if filters.language:
		language = filters.language.lower()
		predicates.append(lambda m: m.original_language.lower() == language)

	if filters.director:
		director = filters.director.lower()
		predicates.append(lambda m: director in m.director.lower())

	if filters.actor:
		actor = filters.actor.lower()
		predicates.append(lambda m: actor in m.cast.lower())

	if filters.year:
		year = str(filters.year).strip()
		predicates.append(lambda m: m.release_date.startswith(year))

	if filters.decade:
		bounds = _decade_bounds(filters.decade)
		if bounds is None:
			logger.warning(f"[Filters] Unparsable decade filter '{filters.decade}'; nothing can match")
			predicates.append(lambda m: False)
		else:
			start, end = bounds

			def in_decade(m: Movie) -> bool:
				y = m.release_year  # None for malformed dates → excluded
				return y is not None and start <= y <= end

			predicates.append(in_decade)

	if filters.mood:
		mood_genres = [g.lower() for g in get_mood_genres(filters.mood)]
		predicates.append(lambda m: any(g in m.genres.lower() for g in mood_genres))

	return predicates


def search_movies(catalog: Sequence[Movie], query: str = '', filters: Optional[SearchFilters] = None) -> List[Movie]:
	"""
	Filter the catalog by free text and optional structured filters.

	- query: case-insensitive substring matched against title, director, cast, genres and overview
	- filters: every populated field is ANDed onto the text matches
	Returns matches ordered by popularity (highest first); ties keep catalog order.
	"""
	results = list(catalog)  # never touch the caller's sequence

	needle = (query or '').strip().lower()
	if needle:
		results = [m for m in results if _text_matches(m, needle)]
		logger.debug(f"[Filters] Text '{needle}' matched {len(results)} of {len(catalog)} movies")

	if filters is not None and not filters.is_empty():
		for predicate in _build_predicates(filters):
			results = [m for m in results if predicate(m)]
		logger.debug(f"[Filters] {len(results)} movies left after filters {filters}")

	# list.sort is stable, so equal popularity keeps catalog order
	results.sort(key=lambda m: m.popularity, reverse=True)
	return results


def get_random_movie(catalog: Sequence[Movie], rng: Optional[random.Random] = None) -> Optional[Movie]:
	"""Uniformly random catalog entry, or None when the catalog is empty."""
	if not catalog:
		return None
	picker = rng or random
	return catalog[picker.randrange(len(catalog))]


def get_movies_by_decade(catalog: Sequence[Movie], decade: str) -> List[Movie]:
	return search_movies(catalog, '', SearchFilters(decade=decade))
