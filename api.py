"""
FastAPI server exposing MovieBuddy.
Endpoints:
- GET /health: basic health check
- GET /search?q=...&genre=...&top_k=10: filter-engine search
- POST /chat: route one chat message and return the bot reply with movies
- GET /recommendations?history=...&movie_id=...: "you might also like" list
- GET /surprise: one random movie
- GET /genres: every genre in the catalog
- POST /movies/{movie_id}/interactions: record like/dislike/watched

Startup loads the catalog from MOVIE_DATA_PATH and, when enabled, the semantic index
(INDEX_BASE_PATH) and the OpenRouter generator.
"""

# Import standard libraries for timing and typing
import time  # measure startup and request latencies
import uuid  # session ids for new chats
from typing import Dict, List, Literal, Optional, Tuple  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, HTTPException, Query  # FastAPI primitives
from pydantic import BaseModel  # request/response schema definitions

# Import our internal modules
from moviebuddy.config import get_settings  # environment configuration
from moviebuddy.data_loader import DataLoader  # loads the catalog
from moviebuddy.filters import get_random_movie, search_movies  # filter engine
from moviebuddy.generator import OpenRouterGenerator  # generative fallback
from moviebuddy.models import ChatSession, Movie, SearchFilters, get_full_poster_url, get_tags  # data classes
from moviebuddy.preferences import PreferenceStore, generate_user_id  # interaction tracking
from moviebuddy.recommendations import recommend  # recommendation engine
from moviebuddy.router import IntentRouter  # chat intent routing
from moviebuddy.semantic import SemanticSearcher  # semantic fallback

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="MovieBuddy API", version="1.0.0")  # web app

# Globals that hold the session-wide catalog and collaborators
CATALOG: List[Movie] = []  # read-only after startup
SEMANTIC: Optional[SemanticSearcher] = None  # None when semantic search is disabled
GENERATOR: Optional[OpenRouterGenerator] = None  # None when no API key is configured
PREFERENCES = PreferenceStore()  # shared interaction log; per-user views via for_user()
SESSIONS: Dict[str, Tuple[ChatSession, IntentRouter]] = {}  # session id -> state and router, least recently used first
MAX_SESSIONS: int = 1000  # oldest sessions are evicted beyond this
STARTUP_TIME_S: float = 0.0  # measures how long startup took


class MovieOut(BaseModel):
	id: str
	title: str
	director: str
	cast: str
	genres: List[str]
	original_language: str
	overview: str
	popularity: float
	poster_url: str
	release_date: str
	runtime: str
	vote_average: float
	vote_count: int
	tags: List[str]


class SearchResponse(BaseModel):
	query: str
	top_k: int
	elapsed_ms: float
	results: List[MovieOut]


class ChatRequest(BaseModel):
	query: str
	session_id: Optional[str] = None


class ChatResponse(BaseModel):
	session_id: str
	intent: str
	text: str
	movies: List[MovieOut]


class InteractionRequest(BaseModel):
	kind: Literal['like', 'dislike', 'watched']
	session_id: Optional[str] = None


def to_movie_out(m: Movie) -> MovieOut:
	"""Convert a catalog Movie into the response schema."""
	return MovieOut(
		id=m.id,
		title=m.title,
		director=m.director,
		cast=m.cast,
		genres=m.genre_list,
		original_language=m.original_language,
		overview=m.overview,
		popularity=m.popularity,
		poster_url=get_full_poster_url(m.poster_path),
		release_date=m.release_date,
		runtime=m.runtime,
		vote_average=m.vote_average,
		vote_count=m.vote_count,
		tags=get_tags(m),
	)


def find_movie(movie_id: str) -> Movie:
	for movie in CATALOG:
		if movie.id == movie_id:
			return movie
	raise HTTPException(status_code=404, detail=f"Movie {movie_id} not found")


def get_session(session_id: Optional[str]) -> Tuple[str, ChatSession, IntentRouter]:
	"""Return the session's state and router, creating both on first use."""
	if session_id and session_id in SESSIONS:
		session, router = SESSIONS.pop(session_id)
		SESSIONS[session_id] = (session, router)  # re-insert as most recently used
		return session_id, session, router

	session_id = session_id or uuid.uuid4().hex
	session = ChatSession(user_id=generate_user_id())
	tracker = PREFERENCES.for_user(session.user_id)
	semantic = SEMANTIC.for_preferences(tracker) if SEMANTIC is not None else None
	router = IntentRouter(CATALOG, semantic=semantic, generator=GENERATOR, tracker=tracker)
	SESSIONS[session_id] = (session, router)
	while len(SESSIONS) > max(MAX_SESSIONS, 1):
		evicted = next(iter(SESSIONS))
		del SESSIONS[evicted]
		logger.debug(f"[API] Evicted chat session {evicted}")
	logger.debug(f"[API] New chat session {session_id} for {session.user_id}")
	return session_id, session, router


# FastAPI startup hook to initialize the catalog and collaborators once
@app.on_event("startup")
async def startup_event():
	"""Load the catalog and optional collaborators, then log how it went."""
	global CATALOG, SEMANTIC, GENERATOR, MAX_SESSIONS, STARTUP_TIME_S
	start = time.time()
	settings = get_settings()
	MAX_SESSIONS = settings.max_chat_sessions

	logger.info("[API] Startup: loading movies...")
	try:
		CATALOG = DataLoader().load(settings.movie_data_path)
	except FileNotFoundError as e:
		logger.error(f"[API] {e}; serving an empty catalog")
		CATALOG = []

	if settings.semantic_search_enabled and CATALOG:
		# Imported lazily so the model only loads when semantic search is switched on
		from moviebuddy.embeddings import EmbeddingGenerator
		from moviebuddy.vector_store import VectorStore

		embedder = EmbeddingGenerator(settings.embedding_model)
		store = None
		if VectorStore.index_files_exist(settings.index_base_path):
			store = VectorStore.load_index(settings.index_base_path, CATALOG)
		SEMANTIC = SemanticSearcher(
			CATALOG,
			embedder,
			vector_store=store,
			match_threshold=settings.semantic_match_threshold,
			match_count=settings.semantic_match_count,
		)

	if settings.generation_enabled:
		GENERATOR = OpenRouterGenerator.from_settings(settings)

	STARTUP_TIME_S = time.time() - start
	logger.info(
		f"[API] Startup complete in {STARTUP_TIME_S:.2f}s | movies={len(CATALOG)} | semantic={SEMANTIC is not None} | generator={GENERATOR is not None}"
	)


@app.on_event("shutdown")
async def shutdown_event():
	if GENERATOR is not None:
		await GENERATOR.aclose()


@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",
		"movies": len(CATALOG),
		"semantic_search": SEMANTIC is not None,
		"generator": GENERATOR is not None,
		"startup_seconds": round(STARTUP_TIME_S, 2),
	}


@app.get("/search", response_model=SearchResponse)
async def search(
	q: str = Query("", description="Free text matched against title, director, cast, genres and overview"),
	genre: Optional[str] = None,
	language: Optional[str] = None,
	year: Optional[str] = None,
	decade: Optional[str] = None,
	director: Optional[str] = None,
	actor: Optional[str] = None,
	mood: Optional[Literal['bored', 'sad', 'excited', 'romantic', 'adventure', 'family']] = None,
	top_k: int = Query(10, ge=1, le=100),
):
	"""Run the filter engine and return the head of the ranked list."""
	start = time.time()
	filters = SearchFilters(genre=genre, language=language, year=year, decade=decade, director=director, actor=actor, mood=mood)
	results = search_movies(CATALOG, q, filters)[:top_k]
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /search q='{q}' served {len(results)} results in {elapsed_ms:.2f} ms")
	return SearchResponse(query=q, top_k=top_k, elapsed_ms=round(elapsed_ms, 2), results=[to_movie_out(m) for m in results])


@app.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
	"""Route one chat message through the intent router."""
	session_id, session, router = get_session(request.session_id)
	response = await router.route(request.query, session)
	return ChatResponse(
		session_id=session_id,
		intent=response.intent,
		text=response.text,
		movies=[to_movie_out(m) for m in response.movies],
	)


@app.get("/recommendations", response_model=List[MovieOut])
async def recommendations(history: List[str] = Query(default=[]), movie_id: Optional[str] = None):
	"""Recommendations seeded by past queries and/or a reference movie."""
	reference = find_movie(movie_id) if movie_id else None
	return [to_movie_out(m) for m in recommend(CATALOG, history, reference)]


@app.get("/surprise", response_model=Optional[MovieOut])
async def surprise():
	movie = get_random_movie(CATALOG)
	return to_movie_out(movie) if movie else None


@app.get("/genres", response_model=List[str])
async def genres():
	return DataLoader().get_all_genres(CATALOG)


@app.post("/movies/{movie_id}/interactions", status_code=204)
async def track_interaction(movie_id: str, request: InteractionRequest):
	"""
	Record like/dislike/watched; feeds preferred genres.
	With a session_id the interaction belongs to that chat session's user (404 when unknown);
	without one it goes to the shared anonymous user and no session is created.
	"""
	movie = find_movie(movie_id)
	if request.session_id is None:
		tracker = PREFERENCES
	elif request.session_id in SESSIONS:
		session, _ = SESSIONS[request.session_id]
		tracker = PREFERENCES.for_user(session.user_id)
	else:
		raise HTTPException(status_code=404, detail=f"Chat session {request.session_id} not found")
	await tracker.track(movie.id, request.kind, movie.genre_list)
