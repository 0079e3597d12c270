"""
Behaviour tests for the intent router, driven with in-process fake collaborators.
"""

import asyncio
import random

from moviebuddy.collaborators import GenerationError, GenerationResult, SemanticSearchError
from moviebuddy.models import ChatSession, Movie
from moviebuddy.router import FACT_QUESTIONS, IntentRouter


class FakeSemantic:
	def __init__(self, results=None, error=None, genres=None, genres_error=None):
		self.results = results or []
		self.error = error
		self.genres = genres or []
		self.genres_error = genres_error
		self.queries = []

	async def search(self, query):
		self.queries.append(query)
		if self.error:
			raise self.error
		return list(self.results)

	async def preferred_genres(self):
		if self.genres_error:
			raise self.genres_error
		return list(self.genres)


class FakeGenerator:
	def __init__(self, message='', error=None):
		self.message = message
		self.error = error
		self.calls = []

	async def generate(self, prompt, context=None):
		self.calls.append((prompt, context))
		if self.error:
			raise self.error
		return GenerationResult(message=self.message)


class FakeTracker:
	def __init__(self, error=None):
		self.error = error
		self.calls = []

	async def track(self, movie_id, kind, genres):
		self.calls.append((movie_id, kind, genres))
		if self.error:
			raise self.error


def route(router, text, session=None):
	return asyncio.run(router.route(text, session))


def ids(movies):
	return [m.id for m in movies]


def test_rule_order_is_fixed(catalog):
	router = IntentRouter(catalog)
	assert router.rule_names == [
		'semantic',
		'plot_suggestion',
		'fact_director', 'fact_cast', 'fact_genre', 'fact_release', 'fact_overview', 'fact_rating',
		'surprise',
		'mood',
		'decade',
		'language',
		'genre',
		'general_search',
	]


def test_blank_input_asks_for_something(catalog):
	response = route(IntentRouter(catalog), '   ')
	assert response.intent == 'empty'
	assert response.movies == []


# ---- surprise -------------------------------------------------------------------

def test_surprise_me_returns_exactly_one_movie(catalog):
	router = IntentRouter(catalog, rng=random.Random(3))
	response = route(router, 'Surprise me!')
	assert response.intent == 'surprise'
	assert len(response.movies) == 1
	assert response.movies[0] in catalog


def test_surprise_with_single_movie_catalog():
	only = Movie(id='x', title='Only One')
	response = route(IntentRouter([only]), 'surprise me')
	assert ids(response.movies) == ['x']


def test_surprise_with_empty_catalog_apologises():
	response = route(IntentRouter([]), 'pick something random')
	assert response.movies == []
	assert 'Sorry' in response.text


# ---- fact questions -------------------------------------------------------------

def test_who_directed_answers_from_the_catalog(catalog):
	response = route(IntentRouter(catalog), 'who directed inception')
	assert 'Christopher Nolan' in response.text
	assert ids(response.movies) == ['1']
	assert response.intent == 'fact_director'


def test_unknown_movie_is_not_found(catalog):
	response = route(IntentRouter(catalog), 'who directed flibbertigibbet')
	assert response.movies == []
	assert "couldn't find" in response.text


def test_close_misspelling_gets_a_suggestion(catalog):
	response = route(IntentRouter(catalog), 'who directed incepton?')
	assert response.movies == []
	assert 'Did you mean "Inception"' in response.text


def test_question_without_a_name_asks_which_movie(catalog):
	response = route(IntentRouter(catalog), 'who directed?')
	assert response.movies == []
	assert response.intent == 'fact_director'
	assert 'Which movie' in response.text


def test_each_fact_question(catalog):
	router = IntentRouter(catalog)
	cases = [
		('cast of titanic', 'fact_cast', 'Kate Winslet', '3'),
		('what genre is toy story?', 'fact_genre', 'Animation, Family, Comedy', '4'),
		('when was blade runner released?', 'fact_release', '1982-06-25', '8'),
		('what is the movie inception about', 'fact_overview', 'steals secrets', '1'),
		('rating of titanic', 'fact_rating', '7.9/10', '3'),
		('director of the dark knight', 'fact_director', 'Christopher Nolan', '2'),
	]
	for text, intent, expected, movie_id in cases:
		response = route(router, text)
		assert response.intent == intent, text
		assert expected in response.text, text
		assert ids(response.movies) == [movie_id], text


def test_missing_field_is_reported_not_invented(catalog):
	response = route(IntentRouter(catalog), 'who directed undated mystery')
	assert "don't have director information" in response.text
	assert ids(response.movies) == ['9']


def test_extraction_takes_the_first_capture_without_validation(catalog):
	router = IntentRouter(catalog)
	overview = next(q for q in FACT_QUESTIONS if q.intent == 'fact_overview')
	# a title that itself contains the trigger phrase is not special-cased
	assert router.extract_movie_name(overview, 'what is what is love about') == 'what is love'


# ---- semantic fallback ----------------------------------------------------------

def test_semantic_results_short_circuit_later_rules(catalog):
	semantic = FakeSemantic(results=[catalog[2], catalog[4]], genres=['Drama', 'Romance'])
	response = route(IntentRouter(catalog, semantic=semantic), 'romantic movies on a ship')
	assert response.intent == 'semantic'
	assert ids(response.movies) == ['3', '5']
	assert 'Drama, Romance' in response.text
	assert semantic.queries == ['romantic movies on a ship']


def test_reserved_keywords_skip_semantic(catalog):
	semantic = FakeSemantic(results=[catalog[3]])
	response = route(IntentRouter(catalog, semantic=semantic), 'director of inception')
	assert semantic.queries == []
	assert 'Christopher Nolan' in response.text


def test_semantic_failure_falls_through(catalog):
	semantic = FakeSemantic(error=SemanticSearchError('backend down'))
	response = route(IntentRouter(catalog, semantic=semantic), 'romantic movies')
	assert response.intent == 'mood'
	assert response.movies


def test_semantic_empty_result_falls_through(catalog):
	semantic = FakeSemantic(results=[])
	response = route(IntentRouter(catalog, semantic=semantic), 'tamil films')
	assert response.intent == 'language'
	assert ids(response.movies) == ['6']


def test_preferred_genre_failure_only_drops_personalisation(catalog):
	semantic = FakeSemantic(results=[catalog[0]], genres_error=RuntimeError('no prefs'))
	response = route(IntentRouter(catalog, semantic=semantic), 'dream heist')
	assert response.intent == 'semantic'
	assert ids(response.movies) == ['1']
	assert 'taste' not in response.text


# ---- plot suggestions -----------------------------------------------------------

def test_plot_suggestion_uses_the_generator(catalog):
	generator = FakeGenerator(message='A pirate crew discovers a map to the moon.')
	semantic = FakeSemantic(results=[catalog[0]])
	response = route(IntentRouter(catalog, semantic=semantic, generator=generator), 'suggest a plot about pirates')
	assert response.intent == 'plot_suggestion'
	assert response.text == 'A pirate crew discovers a map to the moon.'
	assert response.movies == []
	assert semantic.queries == []  # "plot" is reserved
	assert generator.calls[0][1]['intent'] == 'plot_suggestion'


def test_plot_suggestion_failure_apologises(catalog):
	generator = FakeGenerator(error=GenerationError('quota'))
	response = route(IntentRouter(catalog, generator=generator), 'any storyline idea for a plot?')
	assert response.text == IntentRouter.PLOT_APOLOGY
	assert route(IntentRouter(catalog), 'suggest a plot').text == IntentRouter.PLOT_APOLOGY


# ---- keyword filters ------------------------------------------------------------

def test_mood_keywords(catalog):
	response = route(IntentRouter(catalog), "i'm feeling sad today")
	assert response.intent == 'mood'
	assert 0 < len(response.movies) <= IntentRouter.MOOD_LIMIT
	for movie in response.movies:
		assert any(g in movie.genres for g in ('Drama', 'Romance', 'Family'))


def test_mood_wins_over_decade(catalog):
	response = route(IntentRouter(catalog), 'romantic 90s movies')
	assert response.intent == 'mood'


def test_decade_keywords(catalog):
	response = route(IntentRouter(catalog), '90s classics')
	assert response.intent == 'decade'
	assert ids(response.movies) == ['3', '4', '5']
	assert len(response.movies) <= IntentRouter.DECADE_LIMIT


def test_language_keywords(catalog):
	assert ids(route(IntentRouter(catalog), 'bollywood hits').movies) == ['5']
	assert ids(route(IntentRouter(catalog), 'telugu blockbusters').movies) == ['7']


def test_genre_keywords(catalog):
	response = route(IntentRouter(catalog), 'thriller night')
	assert response.intent == 'genre'
	assert ids(response.movies) == ['2', '8', '6']


def test_keyword_rule_with_no_matches_explains():
	catalog = [Movie(id='a', title='Quiet', genres='Documentary')]
	response = route(IntentRouter(catalog), 'comedy please')
	assert response.intent == 'genre'
	assert response.movies == []
	assert "couldn't find" in response.text


# ---- general search -------------------------------------------------------------

def test_general_search_records_history_and_tracks(catalog):
	tracker = FakeTracker()
	session = ChatSession(user_id='u1')
	router = IntentRouter(catalog, tracker=tracker)

	async def scenario():
		response = await router.route('nolan', session)
		await asyncio.sleep(0)  # let the background tracking task run
		return response

	response = asyncio.run(scenario())
	assert response.intent == 'general_search'
	assert ids(response.movies)[:2] == ['2', '1']
	assert session.search_history == ['nolan']
	assert tracker.calls == [('2', 'search', ['Drama', 'Action', 'Crime', 'Thriller'])]


def test_general_search_adds_recommendations_from_history(catalog):
	session = ChatSession(search_history=['christopher nolan'])
	response = route(IntentRouter(catalog), 'kate winslet', session)
	assert ids(response.movies) == ['3', '1', '2']
	assert 'You might also like' in response.text
	assert session.search_history == ['christopher nolan', 'kate winslet']


def test_no_note_when_recommendations_add_nothing(catalog):
	response = route(IntentRouter(catalog), 'leonardo')
	assert ids(response.movies) == ['3', '1']
	assert 'You might also like' not in response.text


def test_merged_results_are_unique_and_capped():
	movies = [Movie(id=str(i), title=f'Star Story {i}', popularity=float(i)) for i in range(25)]
	session = ChatSession(search_history=['story'])
	response = route(IntentRouter(movies), 'star', session)
	movie_ids = ids(response.movies)
	assert len(movie_ids) <= IntentRouter.COMBINED_LIMIT
	assert len(movie_ids) == len(set(movie_ids))


def test_no_results_uses_the_generator(catalog):
	generator = FakeGenerator(message='Try "Arrival" for thoughtful sci-fi.')
	session = ChatSession()
	response = route(IntentRouter(catalog, generator=generator), 'zzz qqq', session)
	assert response.intent == 'generative_fallback'
	assert response.text == 'Try "Arrival" for thoughtful sci-fi.'
	assert response.movies == []
	assert session.search_history == []


def test_no_results_and_no_generator_is_a_fixed_message(catalog):
	session = ChatSession()
	for generator in (None, FakeGenerator(error=GenerationError('down')), FakeGenerator(message='   ')):
		response = route(IntentRouter(catalog, generator=generator), 'zzz qqq', session)
		assert response.intent == 'not_found'
		assert "couldn't find any movies matching" in response.text
	assert session.search_history == []


def test_tracking_failure_never_reaches_the_user(catalog):
	router = IntentRouter(catalog, tracker=FakeTracker(error=RuntimeError('db offline')))

	async def scenario():
		response = await router.route('nolan')
		await asyncio.sleep(0)
		return response

	assert asyncio.run(scenario()).movies


def test_only_one_leading_name_prefix_is_dropped(catalog):
	router = IntentRouter(catalog)
	overview = next(q for q in FACT_QUESTIONS if q.intent == 'fact_overview')
	director = next(q for q in FACT_QUESTIONS if q.intent == 'fact_director')
	assert router.extract_movie_name(overview, 'what is the movie film x about') == 'film x'
	assert router.extract_movie_name(director, 'who directed the dark knight') == 'the dark knight'
