"""
Data models for MovieBuddy.
Defines the catalog record, search filters, chat session state and bot responses.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import regex to pull the leading year out of partial dates
import re  # year parsing
# Import typing helpers for precise and self-documenting types
from typing import List, Literal, Optional  # lists, closed string sets, optional values


# Closed set of moods the Filter Engine understands
MoodType = Literal['bored', 'sad', 'excited', 'romantic', 'adventure', 'family']
MOODS = ('bored', 'sad', 'excited', 'romantic', 'adventure', 'family')

# Kinds of interactions the preference tracker records
InteractionKind = Literal['like', 'dislike', 'watched', 'search']
INTERACTION_KINDS = ('like', 'dislike', 'watched', 'search')

TMDB_IMAGE_BASE = 'https://image.tmdb.org/t/p/w500'
PLACEHOLDER_POSTER = '/placeholder.svg'

_RE_LEADING_YEAR = re.compile(r"^\s*(\d+)")


def parse_release_year(release_date: Optional[str]) -> Optional[int]:
	"""Return the year in front of the first '-' of a (possibly partial) date, or None."""
	if not release_date:
		return None
	m = _RE_LEADING_YEAR.match(release_date.split('-')[0])
	if not m:
		return None
	return int(m.group(1))


@dataclass(frozen=True)
class Movie:
	"""
	Represents a single catalog entry exactly as it was loaded.
	Cast and genres stay comma-joined strings so substring matching sees the raw text.
	"""
	id: str  # unique identifier within the catalog
	title: str  # display title (never empty)
	director: str = ''  # director name as written in the source
	cast: str = ''  # comma-joined list of actors
	genres: str = ''  # comma-joined list of genres, e.g. "Action, Thriller"
	original_language: str = ''  # ISO-639-1 style code ("en", "hi", ...)
	overview: str = ''  # short synopsis
	popularity: float = 0.0  # non-negative popularity score used for ordering
	poster_path: str = ''  # TMDB poster path or full URL
	release_date: str = ''  # ISO date, may be partial ("1999" or "1999-03")
	runtime: str = ''  # runtime as provided by the source
	vote_average: float = 0.0  # 0..10 rating
	vote_count: int = 0  # number of votes
	imdb_id: str = ''  # optional IMDb identifier

	@property
	def genre_list(self) -> List[str]:
		"""Genres split on commas with whitespace trimmed."""
		return [g.strip() for g in self.genres.split(',') if g.strip()]

	@property
	def release_year(self) -> Optional[int]:
		return parse_release_year(self.release_date)


@dataclass
class SearchFilters:
	"""
	Structured filters for the Filter Engine.
	Every field that is set must hold for a movie to survive (AND semantics).
	"""
	genre: Optional[str] = None
	language: Optional[str] = None
	year: Optional[str] = None  # matched as a prefix of release_date
	decade: Optional[str] = None  # decade start, e.g. "1990"
	director: Optional[str] = None
	actor: Optional[str] = None
	mood: Optional[MoodType] = None

	def is_empty(self) -> bool:
		return not any([self.genre, self.language, self.year, self.decade, self.director, self.actor, self.mood])


@dataclass
class ChatSession:
	"""
	Per-user conversational state passed into the router explicitly.
	The router only ever appends to search_history, and only after a successful general search.
	"""
	user_id: str = ''
	search_history: List[str] = field(default_factory=list)


@dataclass
class BotResponse:
	"""A single bot reply: text for the user plus the ranked movies to show alongside it."""
	text: str
	movies: List[Movie] = field(default_factory=list)
	intent: str = ''  # name of the router rule that produced this reply


def get_full_poster_url(poster_path: Optional[str]) -> str:
	"""Turn a TMDB poster path into a displayable URL."""
	if not poster_path:
		return PLACEHOLDER_POSTER
	if poster_path.startswith('http'):
		return poster_path
	return f"{TMDB_IMAGE_BASE}{poster_path}"


def get_tags(movie: Movie) -> List[str]:
	"""Return up to three short display badges for a movie."""
	tags: List[str] = []

	if movie.vote_average >= 8.0:
		tags.append('Highly Rated')
	if movie.vote_average >= 7.5:
		tags.append('Critic Choice')
	if movie.popularity > 10:
		tags.append('Popular')
	if 'family' in movie.genres.lower():
		tags.append('Family Favorite')

	language_tags = {'hi': 'Bollywood', 'en': 'Hollywood', 'ta': 'Tamil Cinema', 'te': 'Telugu Cinema'}
	if movie.original_language in language_tags:
		tags.append(language_tags[movie.original_language])

	year = movie.release_year
	if year is not None:
		if year >= 2020:
			tags.append('Recent Release')
		if year < 2000:
			tags.append('Classic')

	return tags[:3]
