"""
Tests for the FastAPI layer using an in-process service backed by a fake session.
Run: python tests/test_api.py
"""

from contextlib import contextmanager

import requests
from fastapi.testclient import TestClient

from helpers import (
	FakeResponse,
	FakeSession,
	assert_equal,
	assert_true,
	clean_env,
	omdb_page,
	omdb_record,
	omdb_settings,
)

import api
from src.fallback import SAMPLE_MOVIES
from src.movie_service import MovieService

SAMPLE_IDS = [m.id for m in SAMPLE_MOVIES]


def handler(url, params):
	if params.get('i') == 'tt0372784':
		return FakeResponse(200, dict(omdb_record('tt0372784', title='Batman Begins', year='2005', imdbRating='8.2'), Response='True'))
	if params.get('i'):
		return FakeResponse(200, {'Response': 'False', 'Error': 'Incorrect IMDb ID.'})
	if params.get('s') == 'Batman':
		return FakeResponse(200, omdb_page([omdb_record('tt0372784', title='Batman Begins', year='2005')], total=300))
	raise requests.ConnectionError("offline")


@contextmanager
def live_client():
	"""Client whose service talks to the fake provider; module globals are reset afterwards."""
	api.SERVICE = MovieService(omdb_settings(), session=FakeSession(handler))
	try:
		yield TestClient(api.app)
	finally:
		api.SERVICE = None
		api.OFFLINE = False


def test_health():
	with live_client() as client:
		body = client.get('/health').json()
	assert_equal(body['status'], 'ok', "status flag")
	assert_equal(body['service_ready'], True, "service ready")
	assert_equal(body['offline'], False, "live mode")


def test_search():
	with live_client() as client:
		body = client.get('/movies/search', params={'q': 'Batman'}).json()
	assert_equal(body['total_results'], 300, "provider total")
	assert_equal(body['movies'][0]['title'], 'Batman Begins', "first title")
	assert_equal(body['movies'][0]['rating_display'], 'N/A', "search records carry no rating")


def test_blank_search():
	with live_client() as client:
		body = client.get('/movies/search', params={'q': '  '}).json()
	assert_equal(body['movies'], [], "no movies")
	assert_equal(body['total_results'], 0, "zero total")


def test_category_falls_back_to_samples():
	with live_client() as client:
		body = client.get('/movies/category/top_rated').json()
	assert_equal([m['id'] for m in body['movies']], SAMPLE_IDS, "sample movies")
	assert_equal(body['total_results'], len(SAMPLE_MOVIES), "sample total")


def test_trending_route_is_not_a_detail_lookup():
	with live_client() as client:
		resp = client.get('/movies/trending')
	assert_equal(resp.status_code, 200, "trending status")
	assert_true('movies' in resp.json(), "list response")


def test_detail():
	with live_client() as client:
		body = client.get('/movies/tt0372784').json()
	assert_equal(body['title'], 'Batman Begins', "detail title")
	assert_equal(body['rating_display'], '8.2', "detail rating")


def test_detail_not_found():
	with live_client() as client:
		# provider answers "not found" -> sample lookup -> nothing
		assert_equal(client.get('/movies/tt0000001').status_code, 404, "unknown id")
		# provider answers "not found" for a sample id -> the sample movie is returned
		assert_equal(client.get('/movies/tt0111161').json()['title'], 'The Shawshank Redemption', "sample id")


def test_status():
	with live_client() as client:
		body = client.get('/status').json()
	assert_equal(body, {'connected': False, 'provider': 'omdb'}, "provider unreachable")


def test_service_not_ready():
	api.SERVICE = None
	api.OFFLINE = False
	resp = TestClient(api.app).get('/movies/trending')
	assert_equal(resp.status_code, 503, "not initialized")


def test_missing_api_key_starts_offline():
	api.SERVICE = None
	api.OFFLINE = False
	try:
		with clean_env():
			with TestClient(api.app) as client:  # runs the startup hook
				assert_equal(api.OFFLINE, True, "offline mode after ConfigError")
				assert_equal(api.SERVICE, None, "no provider service")

				health = client.get('/health').json()
				assert_equal((health['service_ready'], health['offline']), (True, True), "health in offline mode")

				category = client.get('/movies/category/popular')
				assert_equal(category.status_code, 200, "category served")
				assert_equal([m['id'] for m in category.json()['movies']], SAMPLE_IDS, "category samples")

				trending = client.get('/movies/trending').json()
				assert_equal([m['id'] for m in trending['movies']], SAMPLE_IDS, "trending samples")

				search = client.get('/movies/search', params={'q': 'Batman'}).json()
				assert_equal(search['total_results'], len(SAMPLE_MOVIES), "search samples")
				blank = client.get('/movies/search', params={'q': ' '}).json()
				assert_equal(blank['movies'], [], "blank search stays empty")

				assert_equal(client.get('/movies/tt0111161').json()['title'], 'The Shawshank Redemption', "sample detail")
				assert_equal(client.get('/movies/tt0000001').status_code, 404, "unknown detail")
				assert_equal(client.get('/status').json(), {'connected': False, 'provider': None}, "offline status")
	finally:
		api.SERVICE = None
		api.OFFLINE = False


def main():
	print("Running API tests...")
	test_health()
	test_search()
	test_blank_search()
	test_category_falls_back_to_samples()
	test_trending_route_is_not_a_detail_lookup()
	test_detail()
	test_detail_not_found()
	test_status()
	test_service_not_ready()
	test_missing_api_key_starts_offline()
	print("All API tests passed!")


if __name__ == '__main__':
	main()
