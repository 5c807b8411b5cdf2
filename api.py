"""
FastAPI server exposing the movie catalog.
Endpoints:
- GET /health: basic health check
- GET /status: whether the movie provider is reachable
- GET /movies/search?q=...&page=1: free-text search
- GET /movies/trending: trending movies
- GET /movies/category/{category_id}: merged movies for a category
- GET /movies/{movie_id}: details for one movie

Startup reads the provider configuration from the environment (.env supported).
Without a usable configuration (e.g. no API key) the API starts in offline mode and serves sample movies.
Provider outages never surface as errors: list endpoints fall back to sample movies.
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import List, Optional, Union  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, HTTPException, Query  # FastAPI primitives
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for configuration and the movie pipeline
from src.config import Settings  # environment-based settings
from src.errors import ConfigError  # missing key / unknown provider
from src.fallback import sample_movie, sample_results  # offline data
from src.models import Movie, MovieResults  # internal structures
from src.movie_service import MovieService  # search/category/trending/detail

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Movie Catalog API", version="1.0.0")  # web app

# Globals that hold the service instance and measured startup time
SERVICE: Optional[MovieService] = None  # will point to the initialized service
STARTUP_TIME_S: float = 0.0  # measures how long startup took
OFFLINE: bool = False  # True when startup had no usable provider configuration


# Pydantic model that describes the shape of a single movie in responses
class MovieOut(BaseModel):
	id: Union[str, int]  # IMDb id (OMDb) or numeric id (TMDb)
	title: str  # human-readable title
	year: str  # release year or "Unknown"
	poster_url: str  # poster or placeholder image
	plot: str  # synopsis or default text
	rating: float  # 0 means no rating
	rating_display: str  # "8.8" or "N/A"
	genre: str  # comma-separated genres
	director: str  # director name(s)
	actors: str  # comma-separated cast
	runtime: str  # e.g. "148 min"
	type: str  # media type


# Pydantic model for list endpoints
class MovieListResponse(BaseModel):
	movies: List[MovieOut]  # ordered movies
	total_results: int  # provider total (search) or item count (aggregations)
	elapsed_ms: float  # server-side time in ms


def _movie_out(m: Movie) -> MovieOut:
	"""Convert an internal Movie to the response schema."""
	return MovieOut(**m.to_dict(), rating_display=MovieService.format_rating(m.rating))


def _list_response(results: MovieResults, start: float) -> MovieListResponse:
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	return MovieListResponse(
		movies=[_movie_out(m) for m in results.movies],
		total_results=results.total_results,
		elapsed_ms=round(elapsed_ms, 2),
	)


def _service() -> Optional[MovieService]:
	"""Return the ready service (None in offline mode) or fail with 503 while it is not initialized."""
	if SERVICE is None and not OFFLINE:
		logger.warning("[API] Request received but service not initialized")  # guard log
		raise HTTPException(status_code=503, detail="Movie service not initialized")
	return SERVICE


# FastAPI startup hook to initialize the service once
@app.on_event("startup")
async def startup_event():
	"""Build the movie service from environment settings."""
	global SERVICE, STARTUP_TIME_S, OFFLINE  # refer to module-level globals
	if SERVICE is not None or OFFLINE:  # already provided (e.g. tests)
		return
	start = time.time()  # start timer for startup latency
	logger.info("[API] Startup: reading configuration and creating movie service...")  # log intent
	try:
		SERVICE = MovieService(Settings.from_env())  # create service
	except ConfigError as e:
		logger.error(f"[API] No usable provider configuration, serving sample movies only: {e}")
		OFFLINE = True
	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness checks."""
	return {
		"status": "ok",  # constant indicator
		"service_ready": SERVICE is not None or OFFLINE,  # True once requests can be served
		"offline": OFFLINE,  # sample data only
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


# Provider connectivity check used by the UI status badge
@app.get("/status")
def status():
	"""Report whether live provider data is available."""
	service = _service()
	if service is None:
		return {"connected": False, "provider": None}
	connected = service.check_api_connection()  # never raises
	return {"connected": connected, "provider": service.settings.provider}


# Free-text search
@app.get("/movies/search", response_model=MovieListResponse)
def search(q: str = Query("", description="Movie title or keywords"), page: int = Query(1, ge=1)):
	"""Search movies by text; blank queries return an empty list."""
	service = _service()
	start = time.time()  # start timer
	logger.debug(f"[API] /movies/search q='{q}' page={page}")  # debug log of input
	if service is not None:
		results = service.search_movies(q, page=page)  # run search
	else:
		results = sample_results() if q.strip() else MovieResults(movies=[], total_results=0)
	logger.info(f"[API] /movies/search served {len(results)} movies")  # summary
	return _list_response(results, start)


# Trending movies
@app.get("/movies/trending", response_model=MovieListResponse)
def trending():
	"""Top movies across the trending terms."""
	service = _service()
	start = time.time()
	results = service.trending_movies() if service is not None else sample_results()
	logger.info(f"[API] /movies/trending served {len(results)} movies")
	return _list_response(results, start)


# Category listing
@app.get("/movies/category/{category_id}", response_model=MovieListResponse)
def category(category_id: str):
	"""Merged movies for a category (popular, top_rated, comedy, ...)."""
	service = _service()
	start = time.time()
	results = service.movies_by_category(category_id) if service is not None else sample_results()
	logger.info(f"[API] /movies/category/{category_id} served {len(results)} movies")
	return _list_response(results, start)


# Single movie details
@app.get("/movies/{movie_id}", response_model=MovieOut)
def detail(movie_id: str):
	"""Details for one movie; 404 when neither the provider nor the samples know it."""
	service = _service()
	if service is None:
		movie = sample_movie(movie_id)
	else:
		lookup_id: Union[str, int] = int(movie_id) if service.settings.provider == 'tmdb' and movie_id.isdigit() else movie_id
		movie = service.movie_detail(lookup_id)
	if movie is None:
		raise HTTPException(status_code=404, detail=f"Movie '{movie_id}' not found")
	return _movie_out(movie)
