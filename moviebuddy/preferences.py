"""
Preference tracking module.
Records like/dislike/watched/search interactions per user and derives preferred genres from them.
"""

import random  # random suffix for generated user ids
import string  # alphabet for the suffix
import time  # millisecond timestamp for generated user ids
from dataclasses import dataclass  # interaction record
from typing import Dict, List, Optional

from loguru import logger

from .models import INTERACTION_KINDS, InteractionKind


# How much one interaction of each kind moves every genre it carries
INTERACTION_WEIGHTS: Dict[str, int] = {
	'like': 2,
	'watched': 1,
	'search': 1,
	'dislike': -1,
}


def generate_user_id() -> str:
	"""Anonymous id of the form user_<epoch millis>_<9 lowercase alphanumerics>."""
	suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
	return f"user_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True)
class Interaction:
	user_id: str
	movie_id: str
	kind: str
	genres: tuple


class PreferenceStore:
	"""
	In-memory interaction log for one process.
	A store is bound to a single user; `for_user` hands out views that share the same log.
	"""

	def __init__(self, user_id: Optional[str] = None, log: Optional[List[Interaction]] = None):
		self.user_id = user_id or generate_user_id()
		self._log: List[Interaction] = log if log is not None else []

	def for_user(self, user_id: str) -> 'PreferenceStore':
		return PreferenceStore(user_id=user_id, log=self._log)

	async def track(self, movie_id: str, kind: InteractionKind, genres: List[str]) -> None:
		"""Record one interaction. Unknown kinds are rejected with ValueError."""
		if kind not in INTERACTION_KINDS:
			raise ValueError(f"Unknown interaction kind: {kind}")
		cleaned = tuple(g.strip() for g in genres if g and g.strip())
		self._log.append(Interaction(self.user_id, str(movie_id), kind, cleaned))
		logger.debug(f"[Preferences] {self.user_id} {kind} movie={movie_id} genres={list(cleaned)}")

	async def preferred_genres(self, limit: int = 5) -> List[str]:
		"""Top genres with a positive weighted count; ties keep the order genres were first seen."""
		scores: Dict[str, int] = {}  # insertion order == first seen
		display: Dict[str, str] = {}  # lower-cased key -> first spelling seen
		for interaction in self._log:
			if interaction.user_id != self.user_id:
				continue
			weight = INTERACTION_WEIGHTS[interaction.kind]
			for genre in interaction.genres:
				key = genre.lower()
				display.setdefault(key, genre)
				scores[key] = scores.get(key, 0) + weight

		ranked = sorted((key for key, score in scores.items() if score > 0), key=lambda k: scores[k], reverse=True)
		return [display[key] for key in ranked[:limit]]

	def interactions(self) -> List[Interaction]:
		return [i for i in self._log if i.user_id == self.user_id]
