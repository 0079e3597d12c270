"""
Intent router.
Classifies a chat message with an ordered list of substring rules and dispatches it to the
filter engine, the recommender, or an external collaborator (semantic search, text generation).
The first rule that matches and answers wins; a rule may decline and let the next one try.
"""

import asyncio  # background interaction tracking
import random  # injectable RNG for surprise picks
import re  # fact-question phrase patterns
from dataclasses import dataclass  # rule and fact-question records
from functools import partial  # bind fact questions to the shared handler
from typing import Any, Awaitable, Callable, Dict, List, Optional, Pattern, Sequence, Set, Tuple

from loguru import logger  # console logging
from rapidfuzz import fuzz, process, utils  # "did you mean" title suggestions

from .collaborators import InteractionTracker, SemanticSearch, TextGenerator
from .filters import get_random_movie, search_movies
from .lexicons import DECADE_KEYWORDS, GENRE_KEYWORDS, LANGUAGE_KEYWORDS, MOOD_KEYWORDS, match_keyword_table
from .models import BotResponse, ChatSession, Movie, SearchFilters
from .recommendations import Recommender, merge_results


Handler = Callable[[str, str, ChatSession], Awaitable[Optional[BotResponse]]]


@dataclass(frozen=True)
class IntentRule:
	"""One step of the classification cascade."""
	name: str
	predicate: Callable[[str], bool]  # receives the lower-cased message
	handler: Handler  # returns None to fall through to the next rule


@dataclass(frozen=True)
class FactQuestion:
	"""A trivia question about a single movie field."""
	intent: str
	trigger: Pattern  # recognises the question in the lower-cased message
	capture: Pattern  # group 1 is the movie name
	label: str  # field name used in "no information" replies
	has_value: Callable[[Movie], bool]
	answer: Callable[[Movie], str]


FACT_QUESTIONS: Tuple[FactQuestion, ...] = (
	FactQuestion(
		intent='fact_director',
		trigger=re.compile(r"\bwho directed\b|\bdirector of\b"),
		capture=re.compile(r"(?:who directed|director of)\s+(.+)$"),
		label='director',
		has_value=lambda m: bool(m.director),
		answer=lambda m: f"🎬 {m.title} was directed by {m.director}.",
	),
	FactQuestion(
		intent='fact_cast',
		trigger=re.compile(r"\bcast of\b|\bwho (?:starred|acted|stars) in\b"),
		capture=re.compile(r"(?:cast of|who (?:starred|acted|stars) in)\s+(.+)$"),
		label='cast',
		has_value=lambda m: bool(m.cast),
		answer=lambda m: f"🎭 The cast of {m.title} includes {m.cast}.",
	),
	FactQuestion(
		intent='fact_genre',
		trigger=re.compile(r"\bwhat genre is\b|\bgenre of\b"),
		capture=re.compile(r"(?:what genre is|genre of)\s+(.+)$"),
		label='genre',
		has_value=lambda m: bool(m.genres),
		answer=lambda m: f"🎞️ {m.title} is classified as {m.genres}.",
	),
	FactQuestion(
		intent='fact_release',
		trigger=re.compile(r"\bwhen was\b|\brelease date of\b"),
		capture=re.compile(r"(?:when was|release date of)\s+(.+?)(?:\s+(?:released|made|out))?$"),
		label='release date',
		has_value=lambda m: bool(m.release_date),
		answer=lambda m: f"📅 {m.title} was released on {m.release_date}.",
	),
	FactQuestion(
		intent='fact_overview',
		trigger=re.compile(r"\bwhat is\b.*\babout\b"),
		capture=re.compile(r"what is\s+(.+?)\s+about$"),
		label='plot',
		has_value=lambda m: bool(m.overview),
		answer=lambda m: f"📖 {m.title}: {m.overview}",
	),
	FactQuestion(
		intent='fact_rating',
		trigger=re.compile(r"\brating of\b"),
		capture=re.compile(r"rating of\s+(.+)$"),
		label='rating',
		has_value=lambda m: m.vote_count > 0 or m.vote_average > 0,
		answer=lambda m: f"⭐ {m.title} is rated {m.vote_average:.1f}/10 from {m.vote_count} votes.",
	),
)


class IntentRouter:
	"""
	Ordered rule cascade over lower-cased chat input:
	semantic → plot suggestion → fact questions → surprise → mood → decade → language → genre → general search.
	Collaborators are optional; a missing or failing collaborator just means its rule falls through
	(or answers with a fixed message when it is the last resort).
	"""

	# Presence of any of these skips the semantic attempt
	RESERVED_KEYWORDS = ("plot", "director", "cast", "genre of", "when was", "what is", "rating of", "surprise")
	PLOT_HINTS = ("suggest", "idea", "storyline")
	SURPRISE_KEYWORDS = ("surprise me", "random")
	# Leading words dropped from extracted movie names
	NAME_PREFIXES = ("the movie ", "the film ", "movie ", "film ")

	MOOD_LIMIT = 6
	DECADE_LIMIT = 8
	LANGUAGE_LIMIT = 8
	GENRE_LIMIT = 6
	SEARCH_LIMIT = 8
	COMBINED_LIMIT = 10

	PLOT_APOLOGY = "Sorry, I couldn't come up with a plot idea right now. Please try again in a moment!"

	def __init__(
		self,
		catalog: Sequence[Movie],
		semantic: Optional[SemanticSearch] = None,
		generator: Optional[TextGenerator] = None,
		tracker: Optional[InteractionTracker] = None,
		recommender: Optional[Recommender] = None,
		rng: Optional[random.Random] = None,
		suggestion_cutoff: float = 85.0,
	):
		self.catalog = list(catalog)  # read-only for the session
		self.semantic = semantic
		self.generator = generator
		self.tracker = tracker
		self.recommender = recommender or Recommender()
		self.rng = rng or random.Random()
		self.suggestion_cutoff = suggestion_cutoff
		self._titles = [m.title for m in self.catalog]  # fuzzy suggestion pool
		self._background: Set[asyncio.Task] = set()  # keep fire-and-forget tasks alive
		self.rules: List[IntentRule] = self._build_rules()
		logger.info(f"[Router] Ready with {len(self.catalog)} movies and rules {self.rule_names}")

	@property
	def rule_names(self) -> List[str]:
		return [rule.name for rule in self.rules]

	def _build_rules(self) -> List[IntentRule]:
		rules = [
			IntentRule('semantic', self._wants_semantic, self._handle_semantic),
			IntentRule('plot_suggestion', self._wants_plot_suggestion, self._handle_plot_suggestion),
		]
		for question in FACT_QUESTIONS:
			rules.append(IntentRule(question.intent, question.trigger.search, partial(self._handle_fact, question)))
		rules.extend([
			IntentRule('surprise', lambda t: any(k in t for k in self.SURPRISE_KEYWORDS), self._handle_surprise),
			self._keyword_rule('mood', MOOD_KEYWORDS, 'mood', self.MOOD_LIMIT),
			self._keyword_rule('decade', DECADE_KEYWORDS, 'decade', self.DECADE_LIMIT),
			self._keyword_rule('language', LANGUAGE_KEYWORDS, 'language', self.LANGUAGE_LIMIT),
			self._keyword_rule('genre', GENRE_KEYWORDS, 'genre', self.GENRE_LIMIT),
			IntentRule('general_search', lambda t: True, self._handle_general_search),
		])
		return rules

	async def route(self, user_input: str, session: Optional[ChatSession] = None) -> BotResponse:
		"""Classify one message and produce the bot's reply. Never raises for collaborator failures."""
		text = (user_input or '').strip()
		if not text:
			return BotResponse(
				text="🤔 Tell me what you're in the mood for: a genre, an actor, a decade, or just say \"surprise me\"!",
				intent='empty',
			)

		session = session if session is not None else ChatSession()
		lowered = text.lower()
		logger.debug(f"[Router] Routing '{text}'")

		for rule in self.rules:
			if not rule.predicate(lowered):
				continue
			logger.debug(f"[Router] Rule '{rule.name}' matched")
			response = await rule.handler(text, lowered, session)
			if response is None:
				logger.debug(f"[Router] Rule '{rule.name}' declined; falling through")
				continue
			if not response.intent:
				response.intent = rule.name
			logger.info(f"[Router] '{text}' answered by '{response.intent}' with {len(response.movies)} movie(s)")
			return response

		# general_search always answers, so this only guards against an edited rule list
		return BotResponse(text=self._nothing_found(text), intent='not_found')

	# ---- semantic -----------------------------------------------------------------

	def _wants_semantic(self, lowered: str) -> bool:
		if self.semantic is None:
			return False
		return not any(k in lowered for k in self.RESERVED_KEYWORDS)

	async def _handle_semantic(self, text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
		try:
			movies = await self.semantic.search(text)
		except Exception as e:
			logger.warning(f"[Router] Semantic search failed for '{text}': {e}")
			return None
		if not movies:
			logger.debug("[Router] Semantic search returned no confident match")
			return None

		try:
			preferred = await self.semantic.preferred_genres()
		except Exception as e:
			logger.warning(f"[Router] Could not load preferred genres: {e}")
			preferred = []

		reply = "✨ Here are some movies that match what you're looking for:"
		if preferred:
			reply += f"\n\n🎯 Picked with your taste in mind: you seem to enjoy {', '.join(preferred)}."
		return BotResponse(text=reply, movies=merge_results(movies, limit=self.COMBINED_LIMIT))

	# ---- generative ---------------------------------------------------------------

	def _wants_plot_suggestion(self, lowered: str) -> bool:
		return 'plot' in lowered and any(k in lowered for k in self.PLOT_HINTS)

	async def _handle_plot_suggestion(self, text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
		message = await self._generate(text, self._generation_context('plot_suggestion', session))
		return BotResponse(text=message or self.PLOT_APOLOGY)

	async def _generate(self, prompt: str, context: Dict[str, Any]) -> Optional[str]:
		"""Ask the text generator; None when it is missing, fails, or says nothing."""
		if self.generator is None:
			return None
		try:
			result = await self.generator.generate(prompt, context)
		except Exception as e:
			logger.warning(f"[Router] Text generation failed: {e}")
			return None
		message = (result.message or '').strip() if result else ''
		return message or None

	def _generation_context(self, intent: str, session: ChatSession) -> Dict[str, Any]:
		return {
			'intent': intent,
			'search_history': list(session.search_history[-5:]),
			'catalog_size': len(self.catalog),
		}

	# ---- fact questions -----------------------------------------------------------

	async def _handle_fact(self, question: FactQuestion, text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
		name = self.extract_movie_name(question, lowered)
		if not name:
			return BotResponse(
				text=f"🤔 Which movie do you mean? Try something like \"{self._example(question)}\".",
				intent=question.intent,
			)

		matches = search_movies(self.catalog, name)
		if not matches:
			reply = f"Sorry, I couldn't find a movie called \"{name}\" in my collection."
			suggestion = self._suggest_title(name)
			if suggestion:
				reply += f" Did you mean \"{suggestion}\"?"
			return BotResponse(text=reply, intent=question.intent)

		movie = matches[0]
		if question.has_value(movie):
			reply = question.answer(movie)
		else:
			reply = f"Sorry, I don't have {question.label} information for {movie.title}."
		return BotResponse(text=reply, movies=[movie], intent=question.intent)

	def extract_movie_name(self, question: FactQuestion, lowered: str) -> str:
		"""First capture group of the question pattern, cleaned up; '' when there is none."""
		m = question.capture.search(lowered.rstrip(' ?!.'))
		if not m:
			return ''
		name = m.group(1).strip().strip('"\'').strip()
		# only one prefix is stripped; a bare "the " is kept since titles like "The Dark Knight" start with it
		for prefix in self.NAME_PREFIXES:
			if name.startswith(prefix):
				name = name[len(prefix):].strip()
				break
		return name

	def _suggest_title(self, name: str) -> Optional[str]:
		if not self._titles:
			return None
		best = process.extractOne(
			name,
			self._titles,
			scorer=fuzz.WRatio,
			processor=utils.default_process,
			score_cutoff=self.suggestion_cutoff,
		)
		return best[0] if best else None

	@staticmethod
	def _example(question: FactQuestion) -> str:
		examples = {
			'fact_director': "who directed Inception",
			'fact_cast': "cast of Inception",
			'fact_genre': "what genre is Inception",
			'fact_release': "when was Inception released",
			'fact_overview': "what is Inception about",
			'fact_rating': "rating of Inception",
		}
		return examples.get(question.intent, "who directed Inception")

	# ---- catalog picks ------------------------------------------------------------

	async def _handle_surprise(self, text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
		movie = get_random_movie(self.catalog, self.rng)
		if movie is None:
			return BotResponse(text="Sorry, I couldn't find any movies to surprise you with.")
		return BotResponse(
			text="🎲 Here's a surprise pick for you! This hidden gem might be exactly what you need:",
			movies=[movie],
		)

	def _keyword_rule(self, name: str, table: list, filter_field: str, limit: int) -> IntentRule:
		"""Build a rule that maps a keyword table entry onto a single structured filter."""

		def predicate(lowered: str) -> bool:
			return bool(match_keyword_table(lowered, table)[0])

		async def handler(text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
			value, reply = match_keyword_table(lowered, table)
			filters = SearchFilters(**{filter_field: value})
			movies = search_movies(self.catalog, '', filters)[:limit]
			if not movies:
				reply = f"Sorry, I couldn't find any {name} matches for \"{text}\" in my collection right now."
			return BotResponse(text=reply, movies=movies)

		return IntentRule(name, predicate, handler)

	# ---- general search -----------------------------------------------------------

	async def _handle_general_search(self, text: str, lowered: str, session: ChatSession) -> Optional[BotResponse]:
		results = search_movies(self.catalog, text)[:self.SEARCH_LIMIT]

		if not results:
			message = await self._generate(text, self._generation_context('general_search', session))
			if message:
				return BotResponse(text=message, intent='generative_fallback')
			return BotResponse(text=self._nothing_found(text), intent='not_found')

		recommendations = self.recommender.recommend(self.catalog, list(session.search_history) + [text])
		movies = merge_results(results, recommendations, limit=self.COMBINED_LIMIT)

		reply = f"🔍 Found {len(results)} movie(s) matching \"{text}\":"
		if len(movies) > len(results):
			reply += "\n\n✨ You might also like the extra picks below, based on your recent searches."

		# only successful searches feed personalization
		session.search_history.append(text)
		self._track_in_background(results[0], 'search')
		return BotResponse(text=reply, movies=movies)

	@staticmethod
	def _nothing_found(text: str) -> str:
		return f"Sorry, I couldn't find any movies matching \"{text}\". Try searching by genre, mood, language, or decade!"

	# ---- tracking -----------------------------------------------------------------

	def _track_in_background(self, movie: Movie, kind: str) -> None:
		if self.tracker is None:
			return
		task = asyncio.create_task(self._track_safely(movie, kind))
		self._background.add(task)
		task.add_done_callback(self._background.discard)

	async def _track_safely(self, movie: Movie, kind: str) -> None:
		try:
			await self.tracker.track(movie.id, kind, movie.genre_list)
		except Exception as e:
			logger.warning(f"[Router] Tracking '{kind}' for movie {movie.id} failed: {e}")
