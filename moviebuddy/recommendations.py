"""
Recommendation module.
Scores catalog entries against recent search history and an optional reference movie
to build a short "you might also like" list.
"""

from typing import Iterable, List, Optional, Sequence, Set

from loguru import logger

from .models import Movie


class Recommender:
	"""
	Additive scorer over two signals:
	- history: every prior query is matched against title, director, genres and cast
	- reference movie: shared genres, same director, and release years close together
	Movies that score zero or less are never recommended.
	"""

	def __init__(
		self,
		title_weight: int = 5,
		director_weight: int = 4,
		genre_weight: int = 3,
		cast_weight: int = 2,
		shared_genre_weight: int = 3,
		same_director_weight: int = 5,
		nearby_year_weight: int = 2,
		nearby_year_window: int = 5,
		limit: int = 6,
	):
		self.title_weight = title_weight
		self.director_weight = director_weight
		self.genre_weight = genre_weight
		self.cast_weight = cast_weight
		self.shared_genre_weight = shared_genre_weight
		self.same_director_weight = same_director_weight
		self.nearby_year_weight = nearby_year_weight
		self.nearby_year_window = nearby_year_window
		self.limit = limit

	def recommend(
		self,
		catalog: Sequence[Movie],
		search_history: Sequence[str],
		reference: Optional[Movie] = None,
	) -> List[Movie]:
		"""
		Return up to `limit` movies ranked by score (highest first, stable on ties).
		Without any history and without a reference there is no signal, so the result is empty.
		"""
		queries = [q.strip().lower() for q in search_history if q and q.strip()]
		if not queries and reference is None:
			logger.debug("[Recommender] No history and no reference movie; nothing to recommend")
			return []

		scored = []
		for movie in catalog:
			score = self.score(movie, queries, reference)
			if score > 0:
				scored.append((score, movie))

		# sort on score only so equal scores keep catalog order
		scored.sort(key=lambda pair: pair[0], reverse=True)
		picks = [movie for _, movie in scored[:self.limit]]
		logger.debug(
			f"[Recommender] {len(scored)} candidates scored above zero; returning {len(picks)} | history={queries[-5:]} | reference={reference.title if reference else None}"
		)
		return picks

	def score(self, movie: Movie, queries: Iterable[str], reference: Optional[Movie] = None) -> int:
		"""Score one candidate. queries must already be lower-cased and non-blank."""
		if reference is not None and movie.id == reference.id:
			return -1

		title = movie.title.lower()
		director = movie.director.lower()
		genres = movie.genres.lower()
		cast = movie.cast.lower()

		score = 0
		for q in queries:
			if q in title:
				score += self.title_weight
			if q in director:
				score += self.director_weight
			if q in genres:
				score += self.genre_weight
			if q in cast:
				score += self.cast_weight

		if reference is not None:
			score += self._reference_score(movie, reference)

		return score

	def _reference_score(self, movie: Movie, reference: Movie) -> int:
		score = 0

		shared = _genre_set(movie) & _genre_set(reference)
		score += self.shared_genre_weight * len(shared)

		# both directors must be known; two blanks are not "the same director"
		if movie.director and movie.director == reference.director:
			score += self.same_director_weight

		year, ref_year = movie.release_year, reference.release_year
		if year is not None and ref_year is not None and abs(year - ref_year) <= self.nearby_year_window:
			score += self.nearby_year_weight

		return score


def _genre_set(movie: Movie) -> Set[str]:
	return {g.lower() for g in movie.genre_list}


_DEFAULT_RECOMMENDER = Recommender()


def recommend(
	catalog: Sequence[Movie],
	search_history: Sequence[str],
	reference: Optional[Movie] = None,
) -> List[Movie]:
	"""Module-level shortcut using the default weights (max 6 results)."""
	return _DEFAULT_RECOMMENDER.recommend(catalog, search_history, reference)


def merge_results(*result_lists: Iterable[Movie], limit: Optional[int] = None) -> List[Movie]:
	"""Concatenate ranked lists, dropping repeated movie ids (first occurrence wins)."""
	merged: List[Movie] = []
	if limit is not None and limit <= 0:
		return merged
	seen: Set[str] = set()
	for results in result_lists:
		for movie in results:
			if movie.id in seen:
				continue
			seen.add(movie.id)
			merged.append(movie)
			if limit is not None and len(merged) >= limit:
				return merged
	return merged
