"""
Embedding generation module.
Turns catalog movies and chat queries into vectors with sentence-transformers.
"""

# Import NumPy for numerical arrays that store embeddings
import numpy as np  # efficient numeric arrays
# Import typing helpers for clear API contracts
from typing import List, Sequence  # list types
# Import the SentenceTransformer model to convert text into embeddings
from sentence_transformers import SentenceTransformer  # pre-trained embedding model

# Import our Movie data class so we can type inputs
from .models import Movie  # catalog record

# Import loguru for consistent console logging
from loguru import logger  # console logger


def movie_document(movie: Movie) -> str:
	"""
	Flatten a movie into the single text block that gets embedded.
	Labels keep fields distinguishable for the model ("Director: ..." vs "Cast: ...").
	"""
	parts = [
		f"Title: {movie.title}",
		f"Director: {movie.director}",
		f"Cast: {movie.cast}",
		f"Genres: {movie.genres}",
		f"Overview: {movie.overview}",
		f"Release Date: {movie.release_date}",
		f"Language: {movie.original_language}",
		f"Rating: {movie.vote_average}/10",
	]
	return ". ".join(parts)


class EmbeddingGenerator:
	"""
	Generates embeddings for movies and queries using sentence-transformers.
	"""

	def __init__(self, model_name: str = 'all-MiniLM-L6-v2'):
		"""
		Load the sentence transformer; the weights download on first use and are cached locally.
		"""
		logger.info(f"[Embeddings] Loading embedding model: {model_name}")  # log model selection
		self.model = SentenceTransformer(model_name)  # load model weights
		self.model_name = model_name  # save model id
		# Ask the model for the dimensionality of produced vectors (e.g., 384)
		self.embedding_dimension = self.model.get_sentence_embedding_dimension()  # vector size
		logger.info(f"[Embeddings] Model ready. Embedding dimension: {self.embedding_dimension}")  # confirm

	def generate_movie_embeddings(
		self,
		movies: Sequence[Movie],
		batch_size: int = 32,
		show_progress: bool = False
	) -> np.ndarray:
		"""
		Embed every movie's document text.
		Returns a NumPy array of shape (num_movies, embedding_dimension), rows aligned with `movies`.
		"""
		# Guard against accidental empty input which would otherwise fail later
		if not movies:
			raise ValueError("No movies provided for embedding generation")  # explicit error

		texts: List[str] = [movie_document(m) for m in movies]  # same order as movies

		logger.info(f"[Embeddings] Generating embeddings for {len(movies)} movies (batch {batch_size})")  # progress

		embeddings = self.model.encode(
			texts,  # input documents
			batch_size=batch_size,  # batch size for efficiency
			show_progress_bar=show_progress,  # display progress bar
			convert_to_numpy=True,  # return as NumPy array
			normalize_embeddings=True  # L2-normalize so cosine == dot product
		)

		logger.info(f"[Embeddings] Generated matrix with shape {embeddings.shape}")  # summary
		return embeddings

	def generate_query_embedding(self, query: str) -> np.ndarray:
		"""
		Embed a single chat query. Returns a vector of length embedding_dimension.
		"""
		if not query or not query.strip():  # empty or whitespace only
			raise ValueError("Query cannot be empty")

		return self.model.encode(
			query.strip(),
			convert_to_numpy=True,
			normalize_embeddings=True
		)

	def get_embedding_dimension(self) -> int:
		return self.embedding_dimension  # cached value
