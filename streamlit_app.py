"""
Streamlit UI for the Movie Catalog.
Calls the local FastAPI server at http://localhost:8000 to fetch movies,
or runs the movie service in-process when the API is unreachable.

Run API (optional):   uvicorn api:app --reload
Run UI:                streamlit run streamlit_app.py
"""

# HTTP client to call the API when running in API mode
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import Dict, List, Optional  # indicates values can be None

# Local service imports for local mode (when API isn't used)
from src.categories import MENU_CATEGORIES  # category menu entries
from src.config import Settings  # environment settings
from src.errors import ConfigError  # missing API key
from src.fallback import sample_results  # offline data when no service can be built
from src.movie_service import MovieService  # search/category/trending/detail
from src.normalizer import format_rating  # "8.8" / "N/A"

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"  # default API base URL
CARDS_PER_ROW = 5  # grid width

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Movie Catalog", layout="wide")  # wide layout

# Main page title
st.title("🎬 Movie Catalog")  # friendly header


# Cache the local service so we only build it once per session
@st.cache_resource(show_spinner=False)
def init_local_service() -> Optional[MovieService]:
	"""Create a local MovieService from environment settings."""
	try:
		return MovieService(Settings.from_env())  # success
	except ConfigError as e:
		# Show an error in the UI so users know local mode is running without a provider
		st.error(f"Movie provider not configured: {e}")
		return None  # signal failure


def fetch_from_api(path: str, params: Optional[Dict] = None) -> Dict:
	"""GET a list endpoint from the API and return its JSON payload."""
	resp = requests.get(f"{api_url}{path}", params=params or {}, timeout=30)
	resp.raise_for_status()  # raise error if server responded with an error code
	return resp.json()


def load_movies(kind: str, value: str = "") -> Dict:
	"""Return {'movies': [...], 'total_results': n} for a category, trending or search request."""
	if local_service is None and not api_available:
		results = sample_results()  # no provider at all: offline sample data
		return {"movies": [m.to_dict() for m in results.movies], "total_results": results.total_results}

	if local_service is not None:
		if kind == "search":
			results = local_service.search_movies(value)
		elif kind == "trending":
			results = local_service.trending_movies()
		else:
			results = local_service.movies_by_category(value)
		return {"movies": [m.to_dict() for m in results.movies], "total_results": results.total_results}

	if kind == "search":
		return fetch_from_api("/movies/search", {"q": value})
	if kind == "trending":
		return fetch_from_api("/movies/trending")
	return fetch_from_api(f"/movies/category/{value}")


def render_cards(movies: List[Dict]):
	"""Render movies as a grid of poster cards with an expandable detail section."""
	for row_start in range(0, len(movies), CARDS_PER_ROW):
		cols = st.columns(CARDS_PER_ROW)
		for col, movie in zip(cols, movies[row_start:row_start + CARDS_PER_ROW]):
			with col:
				st.image(movie["poster_url"], width='stretch')  # poster or placeholder
				st.markdown(f"**{movie['title']}** ({movie['year']})")  # title + year
				st.caption(f"⭐ {format_rating(movie['rating'])} | {movie['genre']}")  # rating + genre
				with st.expander("Detail"):
					st.write(f"Sutradara: {movie['director']}")  # director
					st.write(f"Pemeran: {movie['actors']}")  # actors
					st.write(f"Durasi: {movie['runtime']}")  # runtime
					st.write(movie["plot"])  # synopsis
					st.caption(f"ID: {movie['id']}")  # provider id


# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	api_url = st.text_input("API URL", DEFAULT_API_URL)  # where the API lives
	# Toggle to force local mode; if the API health check fails we also fall back to local
	use_local = st.toggle("Use local service", value=False, help="If enabled or API is unreachable, the app calls the movie provider directly.")

# If not forcing local, check quickly whether the API is reachable
api_available = False  # default assumption
if not use_local:
	try:
		h = requests.get(f"{api_url}/health", timeout=3)  # ping API health endpoint
		api_available = h.ok  # True if server responded 200 OK
	except requests.RequestException:
		api_available = False  # health check failed
		st.sidebar.info("API not reachable; will use local service.")  # inform user

# Initialize local service only when needed (user toggle or API not available)
local_service: Optional[MovieService] = None  # placeholder
if use_local or not api_available:
	local_service = init_local_service()  # build service
	if local_service is not None:
		st.sidebar.success("Local service ready.")  # success note

# Provider status badge
if local_service is not None:
	connected = local_service.check_api_connection()
elif api_available:
	try:
		connected = fetch_from_api("/status").get("connected", False)
	except requests.RequestException:
		connected = False
else:
	connected = False
if connected:
	st.sidebar.success("🟢 Connected to movie provider")
else:
	st.sidebar.warning("🟡 Offline mode: showing sample data")

# Remember the current selection across reruns
if "selection" not in st.session_state:
	st.session_state.selection = ("category", "popular", "Film Populer")

# Category menu plus trending
menu_cols = st.columns(len(MENU_CATEGORIES) + 1)
for col, (category_id, label) in zip(menu_cols, MENU_CATEGORIES):
	with col:
		if st.button(label, width='stretch'):
			st.session_state.selection = ("category", category_id, f"Film {label}")
with menu_cols[-1]:
	if st.button("🔥 Trending", width='stretch'):
		st.session_state.selection = ("trending", "", "🔥 Film Trending")

# Search form; submitting with an empty box keeps the current selection
with st.form("search", clear_on_submit=False):
	query = st.text_input("Cari film", placeholder="e.g., Batman")
	if st.form_submit_button("Search", type="primary") and query.strip():
		st.session_state.selection = ("search", query.strip(), f"🔍 Hasil Pencarian: \"{query.strip()}\"")

kind, value, title = st.session_state.selection
st.subheader(title)

with st.spinner("Memuat film..."):
	try:
		payload = load_movies(kind, value)
	except requests.RequestException as e:  # network/API errors
		st.error(f"API request failed: {e}")  # show human-friendly message
		payload = {"movies": [], "total_results": 0}

movies = payload.get("movies", [])
if not movies and kind == "search":
	st.info(f"Tidak ada hasil untuk \"{value}\"")
else:
	st.caption(f"{payload.get('total_results', 0)} film")
	render_cards(movies)

# Show a footer indicator of current mode
st.sidebar.markdown("---")  # separator
if local_service is not None:
	st.sidebar.caption(f"Mode: Local service (provider={local_service.settings.provider})")  # mode label
elif api_available:
	st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")  # mode label
else:
	st.sidebar.caption("Mode: Offline sample data")  # mode label
