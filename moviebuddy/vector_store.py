"""
Vector store module using FAISS.
Holds movie embeddings for similarity lookups and persists them next to a small metadata file.
"""

# Import NumPy for typed arrays passed to FAISS
import numpy as np  # numeric arrays
# Import FAISS (Facebook AI Similarity Search) for fast nearest-neighbor search
import faiss  # vector index
# Pathlib for robust path handling when saving/loading
from pathlib import Path  # filesystem paths
# Typing hints for clarity of public API
from typing import Dict, List, Optional, Sequence, Tuple  # type hints
# Pickle for persisting the id mapping
import pickle  # simple serialization

from .models import Movie  # catalog record

# Console logging
from loguru import logger  # console logger


class VectorStore:
	"""
	Cosine-similarity index over movie embeddings.
	Row i of the FAISS index belongs to movie_ids[i].
	"""

	def __init__(self, embedding_dimension: int):
		self.embedding_dimension = embedding_dimension  # vector length
		# Inner product on L2-normalized vectors equals cosine similarity
		self.index = faiss.IndexFlatIP(embedding_dimension)
		self.movie_ids: List[str] = []  # index row -> movie id
		self.movies_map: Dict[str, Movie] = {}  # movie id -> Movie for retrieval

		logger.info(f"[VectorStore] Initialized FAISS index | dim={embedding_dimension} | metric=cosine")

	def add_movies(self, movies: Sequence[Movie], embeddings: np.ndarray):
		"""
		Add movies and their embeddings (shape: num_movies x embedding_dimension).
		"""
		# Validate count consistency between metadata and vectors
		if len(movies) != embeddings.shape[0]:
			raise ValueError(
				f"Number of movies ({len(movies)}) doesn't match number of embeddings ({embeddings.shape[0]})"
			)
		if embeddings.shape[1] != self.embedding_dimension:
			raise ValueError(
				f"Embedding dimension ({embeddings.shape[1]}) doesn't match expected ({self.embedding_dimension})"
			)

		vectors = np.ascontiguousarray(embeddings, dtype='float32')  # FAISS wants float32
		faiss.normalize_L2(vectors)  # no-op for already normalized rows
		self.index.add(vectors)

		for movie in movies:
			self.movie_ids.append(movie.id)
			self.movies_map[movie.id] = movie

		logger.info(f"[VectorStore] Added {len(movies)} movies | total in index: {self.index.ntotal}")

	def search(self, query_embedding: np.ndarray, top_k: int = 10) -> List[Tuple[str, float]]:
		"""
		Return up to top_k (movie_id, cosine similarity) pairs, most similar first.
		An empty index yields an empty list.
		"""
		if self.index.ntotal == 0 or top_k <= 0:
			return []

		query = np.array(query_embedding, dtype='float32')
		if query.ndim == 1:
			query = query.reshape(1, -1)
		if query.shape[1] != self.embedding_dimension:
			raise ValueError(
				f"Query embedding dimension ({query.shape[1]}) doesn't match expected ({self.embedding_dimension})"
			)
		faiss.normalize_L2(query)

		distances, indices = self.index.search(query, min(top_k, self.index.ntotal))

		results = []
		for distance, idx in zip(distances[0], indices[0]):
			if idx < 0:  # -1 marks an empty slot
				continue
			results.append((self.movie_ids[idx], float(distance)))
		return results

	def get_movie_by_id(self, movie_id: str) -> Optional[Movie]:
		return self.movies_map.get(movie_id)

	def size(self) -> int:
		return self.index.ntotal

	def save_index(self, filepath: str):
		"""
		Persist the FAISS index (.index) and the row → id mapping (.pkl) under a base path.
		"""
		filepath = Path(filepath)
		filepath.parent.mkdir(parents=True, exist_ok=True)
		index_path = filepath.with_suffix('.index')
		faiss.write_index(self.index, str(index_path))
		metadata_path = filepath.with_suffix('.pkl')
		metadata = {
			'movie_ids': self.movie_ids,
			'embedding_dimension': self.embedding_dimension,
		}
		with open(metadata_path, 'wb') as f:
			pickle.dump(metadata, f)
		logger.info(f"[VectorStore] Saved index to {index_path} and metadata to {metadata_path}")

	@classmethod
	def load_index(cls, filepath: str, movies: Sequence[Movie]) -> 'VectorStore':
		"""
		Load a saved index and reattach the given catalog.
		Rows whose movie is no longer in the catalog stay in the index but are skipped at lookup time.
		"""
		filepath = Path(filepath)
		index_path = filepath.with_suffix('.index')
		metadata_path = filepath.with_suffix('.pkl')

		if not index_path.exists():
			raise FileNotFoundError(f"Index file not found: {index_path}")
		if not metadata_path.exists():
			raise FileNotFoundError(f"Metadata file not found: {metadata_path}")

		with open(metadata_path, 'rb') as f:
			metadata = pickle.load(f)

		store = cls(embedding_dimension=metadata['embedding_dimension'])
		store.index = faiss.read_index(str(index_path))
		store.movie_ids = list(metadata['movie_ids'])
		store.movies_map = {m.id: m for m in movies}

		missing = sum(1 for mid in store.movie_ids if mid not in store.movies_map)
		if missing:
			logger.warning(f"[VectorStore] {missing} indexed movies are not in the current catalog")
		logger.info(f"[VectorStore] Loaded index from {index_path} | total={store.index.ntotal}")
		return store

	@staticmethod
	def index_files_exist(filepath: str) -> bool:
		base = Path(filepath)
		return base.with_suffix('.index').exists() and base.with_suffix('.pkl').exists()
