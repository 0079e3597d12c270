"""
Checks for the static mood/keyword tables.
"""

from moviebuddy.lexicons import (
	DECADE_KEYWORDS,
	GENRE_KEYWORDS,
	LANGUAGE_KEYWORDS,
	MOOD_GENRES,
	MOOD_KEYWORDS,
	get_mood_genres,
	match_keyword_table,
)
from moviebuddy.models import MOODS


def test_every_mood_has_genres():
	for mood in MOODS:
		assert get_mood_genres(mood), mood
	assert set(MOOD_GENRES) == set(MOODS)


def test_mood_genres_keep_their_order():
	assert get_mood_genres('bored') == ['Comedy', 'Action', 'Adventure']
	assert get_mood_genres('romantic') == ['Romance', 'Drama']


def test_unmapped_mood_is_empty_not_an_error():
	assert get_mood_genres('melancholic') == []


def test_first_matching_entry_wins():
	assert match_keyword_table('1990s hits', DECADE_KEYWORDS)[0] == '1990'
	assert match_keyword_table('early 2000s please', DECADE_KEYWORDS)[0] == '2000'
	assert match_keyword_table('best of the 2010s', DECADE_KEYWORDS)[0] == '2010'
	assert match_keyword_table('i feel down and sad', MOOD_KEYWORDS)[0] == 'sad'
	assert match_keyword_table('hindi films', LANGUAGE_KEYWORDS)[0] == 'hi'
	assert match_keyword_table('some comedy', GENRE_KEYWORDS)[0] == 'comedy'


def test_no_match_returns_blanks():
	assert match_keyword_table('space opera', GENRE_KEYWORDS) == ('', '')


def test_every_entry_has_reply_text():
	for table in (MOOD_KEYWORDS, DECADE_KEYWORDS, LANGUAGE_KEYWORDS, GENRE_KEYWORDS):
		for keywords, value, reply in table:
			assert keywords and value and reply
