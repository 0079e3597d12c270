"""Application configuration loaded from environment variables or a .env file."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	movie_data_path: str = Field(default="data/movies.csv", alias="MOVIE_DATA_PATH")
	index_base_path: str = Field(default="models/faiss_index", alias="INDEX_BASE_PATH")

	embedding_model: str = Field(default="all-MiniLM-L6-v2", alias="EMBEDDING_MODEL")
	semantic_search_enabled: bool = Field(default=False, alias="SEMANTIC_SEARCH_ENABLED")
	semantic_match_threshold: float = Field(default=0.7, alias="SEMANTIC_MATCH_THRESHOLD", ge=0.0, le=1.0)
	semantic_match_count: int = Field(default=10, alias="SEMANTIC_MATCH_COUNT", ge=1, le=100)

	openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="google/gemini-2.5-flash-lite", alias="OPENROUTER_MODEL")
	openrouter_api_url: str = Field(default="https://openrouter.ai/api/v1", alias="OPENROUTER_API_URL")
	generation_timeout: float = Field(default=30.0, alias="GENERATION_TIMEOUT", gt=0)

	max_chat_sessions: int = Field(default=1000, alias="MAX_CHAT_SESSIONS", ge=1)

	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True)

	@property
	def generation_enabled(self) -> bool:
		return bool(self.openrouter_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	"""Return cached settings instance."""
	return Settings()
