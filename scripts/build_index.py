"""
Build and persist the semantic search index.

This script:
1) Loads the catalog from MOVIE_DATA_PATH (data/movies.csv by default)
2) Generates embeddings (sentence-transformers)
3) Builds a FAISS index
4) Saves the index and metadata under INDEX_BASE_PATH (models/faiss_index by default)

Usage:
    python -m scripts.build_index

After running this once, the API loads the saved index at startup when
SEMANTIC_SEARCH_ENABLED=true instead of embedding the catalog again.
"""

import time  # measure step timings
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from moviebuddy.config import get_settings  # data and index locations
from moviebuddy.data_loader import DataLoader  # catalog loading
from moviebuddy.embeddings import EmbeddingGenerator  # embedding model wrapper
from moviebuddy.vector_store import VectorStore  # FAISS index helper


def main():
	logger.info("=" * 60)
	logger.info("Build Semantic Search Index")
	logger.info("=" * 60)

	settings = get_settings()
	root = Path(__file__).resolve().parents[1]  # project root
	data_path = root / settings.movie_data_path  # input catalog
	index_base = root / settings.index_base_path  # base filename (no extension)

	# 1) Load data
	logger.info("[1/4] Loading movies...")
	movies = DataLoader().load(str(data_path))
	logger.info(f"[OK] Loaded {len(movies)} movies")
	if not movies:
		logger.error("Catalog is empty; nothing to index")
		return

	# 2) Generate embeddings
	logger.info("[2/4] Generating embeddings...")
	t0 = time.time()
	emb = EmbeddingGenerator(settings.embedding_model)
	movie_embeddings = emb.generate_movie_embeddings(movies, batch_size=32, show_progress=True)
	logger.info(f"[OK] Embeddings generated in {time.time() - t0:.2f}s; shape={movie_embeddings.shape}")

	# 3) Build FAISS index
	logger.info("[3/4] Building FAISS index...")
	store = VectorStore(emb.get_embedding_dimension())
	store.add_movies(movies, movie_embeddings)
	logger.info(f"[OK] Index built with {store.size()} vectors")

	# 4) Save index
	logger.info("[4/4] Saving index and metadata...")
	store.save_index(str(index_base))
	logger.info("[OK] Saved. Set SEMANTIC_SEARCH_ENABLED=true to use it from the API.")
	logger.info("=" * 60)


if __name__ == '__main__':
	main()
