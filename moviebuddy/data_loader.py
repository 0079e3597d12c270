"""
Data loading module.
Builds the in-memory catalog from CSV (the movie export format) or JSON Lines files.
"""

# Standard libs for CSV/JSON parsing, typing, and paths
import csv  # read the CSV export
import json  # read JSON lines
from typing import Any, Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our Movie data class used across the project
from .models import Movie  # catalog record

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Loads movie records and normalizes them into Movie objects.
	Records without a title are dropped; repeated ids keep the first occurrence.
	"""

	# Source column → Movie field; the first column present wins
	FIELD_ALIASES = {
		'id': ('id', 'movie_id'),
		'title': ('Title', 'title'),
		'director': ('Director', 'director'),
		'cast': ('Cast', 'cast'),
		'genres': ('genres', 'Genres'),
		'imdb_id': ('imdb_id',),
		'original_language': ('original_language',),
		'overview': ('overview', 'Overview'),
		'popularity': ('popularity',),
		'poster_path': ('poster_path', 'url'),
		'release_date': ('release_date',),
		'runtime': ('runtime',),
		'vote_average': ('vote_average',),
		'vote_count': ('vote_count',),
	}

	def load(self, filepath: str) -> List[Movie]:
		"""Load a catalog file, picking the parser from the file extension."""
		path = Path(filepath)
		if path.suffix.lower() in ('.jsonl', '.json'):
			return self.load_movies_from_jsonl(str(path))
		return self.load_movies_from_csv(str(path))

	def load_movies_from_csv(self, filepath: str) -> List[Movie]:
		"""
		Load movies from a CSV file with a header row.
		Returns the catalog in file order.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading movies from {filepath}...")  # log action

		rows: List[Dict[str, Any]] = []
		with open(filepath, 'r', encoding='utf-8', newline='') as f:
			reader = csv.DictReader(f)  # header row names the columns
			for row in reader:
				rows.append(row)

		return self._build_catalog(rows)

	def load_movies_from_jsonl(self, filepath: str) -> List[Movie]:
		"""
		Load movies from a JSON Lines (JSONL) file where each line is one JSON object.
		Returns the catalog in file order.
		"""
		filepath = Path(filepath)

		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading movies from {filepath}...")

		rows: List[Dict[str, Any]] = []
		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():
					continue  # blank line
				try:
					rows.append(json.loads(line))
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
					continue

		return self._build_catalog(rows)

	def _build_catalog(self, rows: List[Dict[str, Any]]) -> List[Movie]:
		movies: List[Movie] = []
		seen_ids = set()  # ids already in the catalog
		for index, row in enumerate(rows):
			try:
				movie = self._parse_movie_data(row, index)
			except Exception as e:
				logger.warning(f"[DataLoader] Error parsing movie record {index}: {e}")  # unexpected issue
				continue
			if movie is None:
				continue  # untitled record
			if movie.id in seen_ids:
				logger.debug(f"[DataLoader] Dropping duplicate id {movie.id} ({movie.title})")
				continue
			seen_ids.add(movie.id)
			movies.append(movie)

		logger.info(f"[DataLoader] Successfully loaded {len(movies)} movies.")  # summary
		return movies

	def _parse_movie_data(self, data: Dict[str, Any], index: int) -> Optional[Movie]:
		"""
		Convert a raw record into a Movie, or None when it has no title.
		Numeric fields fall back to zero when missing or unparsable.
		"""
		title = self._text(self._pick(data, 'title'))
		if not title:
			return None

		# Records without an id get a positional one so the catalog stays addressable
		movie_id = self._text(self._pick(data, 'id')) or f"row-{index}"

		return Movie(
			id=movie_id,
			title=title,
			director=self._text(self._pick(data, 'director')),
			cast=self._joined(self._pick(data, 'cast')),
			genres=self._joined(self._pick(data, 'genres')),
			imdb_id=self._text(self._pick(data, 'imdb_id')),
			original_language=self._text(self._pick(data, 'original_language')),
			overview=self._text(self._pick(data, 'overview')),
			popularity=max(0.0, self._float(self._pick(data, 'popularity'))),
			poster_path=self._text(self._pick(data, 'poster_path')),
			release_date=self._text(self._pick(data, 'release_date')),
			runtime=self._text(self._pick(data, 'runtime')),
			vote_average=self._float(self._pick(data, 'vote_average')),
			vote_count=int(self._float(self._pick(data, 'vote_count'))),
		)

	def _pick(self, data: Dict[str, Any], field_name: str) -> Any:
		for key in self.FIELD_ALIASES[field_name]:
			value = data.get(key)
			if value not in (None, ''):
				return value
		return None

	def _text(self, value: Any) -> str:
		"""Trimmed string; None becomes ''."""
		if value is None:
			return ''
		return str(value).strip()

	def _joined(self, value: Any) -> str:
		"""Lists are comma-joined; strings are kept as written."""
		if isinstance(value, list):
			return ', '.join(str(item).strip() for item in value if item)
		return self._text(value)

	def _float(self, value: Any) -> float:
		try:
			return float(value) if value not in (None, '') else 0.0
		except (TypeError, ValueError):
			return 0.0

	def get_all_genres(self, movies: List[Movie]) -> List[str]:
		"""Return a sorted list of all unique genres in the dataset."""
		genres = set()  # unique genres
		for movie in movies:  # iterate
			genres.update(movie.genre_list)
		return sorted(genres)
