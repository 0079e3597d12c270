"""
Semantic search module.
Answers free-text queries by embedding similarity over the catalog, for use as the router's
semantic fallback.
"""

import asyncio  # run blocking model/index work off the event loop
import copy  # per-user views sharing one index
from typing import TYPE_CHECKING, List, Optional, Sequence

from loguru import logger

from .collaborators import SemanticSearchError
from .models import Movie
from .preferences import PreferenceStore
from .vector_store import VectorStore

if TYPE_CHECKING:  # sentence-transformers is only needed by whoever builds the embedder
	from .embeddings import EmbeddingGenerator


class SemanticSearcher:
	"""
	Vector-similarity search with a confidence threshold.
	Only matches at or above `match_threshold` are returned, at most `match_count` of them.
	The best match of every successful search is recorded as a "search" interaction.
	"""

	def __init__(
		self,
		movies: Sequence[Movie],
		embedding_generator: "EmbeddingGenerator",
		vector_store: Optional[VectorStore] = None,
		preferences: Optional[PreferenceStore] = None,
		match_threshold: float = 0.7,
		match_count: int = 10,
	):
		self.embedding_generator = embedding_generator
		self.preferences = preferences
		self.match_threshold = match_threshold
		self.match_count = match_count

		if vector_store is None:
			logger.info("[Semantic] No saved index supplied; embedding the catalog now")
			vector_store = VectorStore(embedding_generator.get_embedding_dimension())
			if movies:
				vector_store.add_movies(movies, embedding_generator.generate_movie_embeddings(movies))
		self.vector_store = vector_store
		logger.info(f"[Semantic] Ready with {self.vector_store.size()} indexed movies")

	def search_sync(self, query: str) -> List[Movie]:
		"""Blocking search; wraps backend errors in SemanticSearchError."""
		try:
			q_emb = self.embedding_generator.generate_query_embedding(query)
			candidates = self.vector_store.search(q_emb, top_k=self.match_count)
		except Exception as e:
			raise SemanticSearchError(f"semantic lookup failed: {e}") from e

		movies: List[Movie] = []
		for movie_id, similarity in candidates:
			if similarity < self.match_threshold:
				continue
			movie = self.vector_store.get_movie_by_id(movie_id)
			if movie is None:
				continue  # indexed movie no longer in the catalog
			movies.append(movie)
		logger.debug(f"[Semantic] '{query}' -> {len(movies)} of {len(candidates)} candidates above {self.match_threshold}")
		return movies

	async def search(self, query: str) -> List[Movie]:
		movies = await asyncio.to_thread(self.search_sync, query)
		if movies and self.preferences is not None:
			await self.preferences.track(movies[0].id, 'search', movies[0].genre_list)
		return movies

	async def preferred_genres(self) -> List[str]:
		if self.preferences is None:
			return []
		return await self.preferences.preferred_genres()

	def for_preferences(self, preferences: PreferenceStore) -> 'SemanticSearcher':
		"""Same index, different user: shares the loaded model and vectors."""
		clone = copy.copy(self)
		clone.preferences = preferences
		return clone
