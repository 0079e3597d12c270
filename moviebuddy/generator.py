"""
Generative text client.
Sends a single chat-completions request to an OpenAI-compatible endpoint (OpenRouter by default)
for answers the catalog cannot give: plot ideas and last-resort replies.
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .collaborators import GenerationError, GenerationResult
from .config import Settings


SYSTEM_PROMPT = (
	"You are MovieBuddy, a friendly movie assistant. Answer in at most four short sentences. "
	"When the user asks for plot ideas, pitch one original storyline with a title. "
	"When you recommend films, only name real, released movies."
)


class OpenRouterGenerator:
	"""One request per call, no retries; every failure surfaces as GenerationError."""

	def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
		self._settings = settings
		self._client = http_client

	@classmethod
	def from_settings(cls, settings: Settings) -> 'OpenRouterGenerator':
		client = httpx.AsyncClient(base_url=settings.openrouter_api_url, timeout=settings.generation_timeout)
		return cls(settings, client)

	async def generate(self, prompt: str, context: Optional[Dict[str, Any]] = None) -> GenerationResult:
		if not self._settings.openrouter_api_key:
			raise GenerationError("OpenRouter API key is not configured")

		payload = {
			"model": self._settings.openrouter_model,
			"temperature": 0.8,
			"messages": [
				{"role": "system", "content": SYSTEM_PROMPT},
				{"role": "user", "content": self._build_prompt(prompt, context or {})},
			],
		}
		headers = {
			"Authorization": f"Bearer {self._settings.openrouter_api_key}",
			"Content-Type": "application/json",
			"X-Title": "MovieBuddy",
		}

		try:
			response = await self._client.post("/chat/completions", json=payload, headers=headers)
		except httpx.HTTPError as e:
			raise GenerationError(f"request failed: {e}") from e
		if response.status_code >= 400:
			raise GenerationError(f"HTTP {response.status_code}: {response.text[:200]}")

		try:
			data = response.json()
		except ValueError as e:
			raise GenerationError("response was not JSON") from e

		choices = data.get("choices") or []
		if not choices:
			raise GenerationError("Model returned no choices")
		content = (choices[0].get("message") or {}).get("content")
		if not isinstance(content, str) or not content.strip():
			raise GenerationError("Model response missing content")

		logger.debug(f"[Generator] {self._settings.openrouter_model} answered with {len(content)} chars")
		return GenerationResult(message=content.strip())

	@staticmethod
	def _build_prompt(prompt: str, context: Dict[str, Any]) -> str:
		lines = [prompt.strip()]
		history = context.get("search_history") or []
		if history:
			lines.append(f"(Recent searches: {', '.join(history)})")
		if context.get("intent") == "general_search":
			lines.append("(Nothing in the local catalog matched this request.)")
		return "\n".join(lines)

	async def aclose(self) -> None:
		await self._client.aclose()
