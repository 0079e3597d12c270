"""
Capability interfaces for the router's external collaborators.
The router only depends on these shapes, so tests can pass simple fakes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .models import InteractionKind, Movie


class CollaboratorError(Exception):
	"""Base class for failures of an external collaborator."""


class SemanticSearchError(CollaboratorError):
	"""Raised when the semantic backend cannot answer a query."""


class GenerationError(CollaboratorError):
	"""Raised when the generative text service fails or returns nothing usable."""


@dataclass
class GenerationResult:
	message: str


class SemanticSearch(Protocol):
	async def search(self, query: str) -> List[Movie]:
		"""Ranked matches; an empty list means no confident match."""
		...

	async def preferred_genres(self) -> List[str]:
		...


class TextGenerator(Protocol):
	async def generate(self, prompt: str, context: Optional[Dict[str, Any]] = None) -> GenerationResult:
		...


class InteractionTracker(Protocol):
	async def track(self, movie_id: str, kind: InteractionKind, genres: List[str]) -> None:
		...
