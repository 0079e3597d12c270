"""
Static lookup tables.
Maps moods to genres and lists the keywords the intent router reacts to, together with the
reply text for each. Editing these tables changes behaviour without touching any logic.
"""

from typing import Dict, List, Tuple

from .models import MoodType


# Mood → canonical genres, most representative first
MOOD_GENRES: Dict[str, Tuple[str, ...]] = {
	'bored': ('Comedy', 'Action', 'Adventure'),
	'sad': ('Drama', 'Romance', 'Family'),
	'excited': ('Action', 'Adventure', 'Thriller'),
	'romantic': ('Romance', 'Drama'),
	'adventure': ('Adventure', 'Action', 'Thriller'),
	'family': ('Family', 'Comedy', 'Animation'),
}


def get_mood_genres(mood: MoodType) -> List[str]:
	"""Genres for a mood; unknown moods map to an empty list."""
	return list(MOOD_GENRES.get(mood, ()))


# Each router table is an ordered list of (trigger keywords, filter value, reply text).
# Order matters: the first entry with any keyword contained in the input wins.

MOOD_KEYWORDS: List[Tuple[Tuple[str, ...], MoodType, str]] = [
	(('bored',), 'bored',
		"😴 Feeling bored? Here are some entertaining picks to lift your spirits:"),
	(('sad', 'down', 'depressed'), 'sad',
		"💙 When you're feeling down, these uplifting movies can help:"),
	(('excited', 'pumped', 'energetic'), 'excited',
		"⚡ Ready for some high-energy entertainment? These will keep you on the edge of your seat:"),
	(('romantic', 'love', 'romance'), 'romantic',
		"💕 In the mood for romance? These beautiful love stories will warm your heart:"),
	(('family', 'kids'), 'family',
		"👨‍👩‍👧‍👦 Perfect for family movie night! These films are great for all ages:"),
]

DECADE_KEYWORDS: List[Tuple[Tuple[str, ...], str, str]] = [
	(('90s', '1990s', 'nineties'), '1990',
		"📼 Ah, the golden 90s! Here are some classics from that amazing decade:"),
	(('2000s', '2000'), '2000',
		"🎬 The 2000s brought us some incredible cinema! Check these out:"),
	(('80s', '1980s', 'eighties'), '1980',
		"🕺 The iconic 80s! Here are some legendary films from that era:"),
	(('2010s', 'twenty-tens'), '2010',
		"📱 The 2010s delivered modern favourites! Here are some standouts:"),
]

LANGUAGE_KEYWORDS: List[Tuple[Tuple[str, ...], str, str]] = [
	(('bollywood', 'hindi'), 'hi',
		"🇮🇳 Bollywood magic! Here are some fantastic Hindi films:"),
	(('hollywood', 'english'), 'en',
		"🎭 Hollywood blockbusters! Here are some great English films:"),
	(('tamil',), 'ta',
		"🌟 Tamil cinema excellence! Here are some brilliant Tamil films:"),
	(('telugu',), 'te',
		"⭐ Telugu movie magic! Here are some amazing Telugu films:"),
]

GENRE_KEYWORDS: List[Tuple[Tuple[str, ...], str, str]] = [
	(('action',), 'action', "💥 Action-packed adventures coming right up:"),
	(('comedy',), 'comedy', "😂 Time for some laughs! These comedies will brighten your day:"),
	(('drama',), 'drama', "🎭 Powerful dramas that will move you:"),
	(('thriller',), 'thriller', "🔥 Edge-of-your-seat thrillers:"),
]


def match_keyword_table(text: str, table: List[Tuple[Tuple[str, ...], str, str]]) -> Tuple[str, str]:
	"""
	Return (filter value, reply text) for the first table entry whose keywords occur in text,
	or ('', '') when nothing matches. text is expected to be lower-cased already.
	"""
	for keywords, value, reply in table:
		if any(k in text for k in keywords):
			return value, reply
	return '', ''
