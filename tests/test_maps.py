"""Tests for geocoding (mocked Redis and HTTP)."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cityprodrivers.services import maps


def _http_returning(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    http = AsyncMock()
    http.get.return_value = resp
    return http


@pytest.mark.asyncio
async def test_reverse_geocode_fetches_and_caches():
    """A cache miss hits Nominatim and stores the address with a TTL."""
    conn = AsyncMock()
    conn.hgetall.return_value = {}
    http = _http_returning({"display_name": "Koramangala, Bengaluru"})

    with patch("cityprodrivers.services.maps._get_redis", return_value=conn), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        address = await maps.reverse_geocode(12.9352, 77.6245)

    assert address == "Koramangala, Bengaluru"
    conn.hset.assert_called_once()
    conn.expire.assert_called_once_with("revgeo:12.93520,77.62450", maps.GEOCODE_CACHE_TTL)


@pytest.mark.asyncio
async def test_reverse_geocode_cache_hit_skips_http():
    conn = AsyncMock()
    conn.hgetall.return_value = {"address": "Cached Street"}
    http = _http_returning({})

    with patch("cityprodrivers.services.maps._get_redis", return_value=conn), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        address = await maps.reverse_geocode(12.9352, 77.6245)

    assert address == "Cached Street"
    http.get.assert_not_called()


@pytest.mark.asyncio
async def test_reverse_geocode_failure_returns_none():
    """Lookup errors never raise; the picker keeps its previous value."""
    conn = AsyncMock()
    conn.hgetall.return_value = {}
    http = AsyncMock()
    http.get.side_effect = httpx.ConnectError("offline")

    with patch("cityprodrivers.services.maps._get_redis", return_value=conn), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        assert await maps.reverse_geocode(12.9352, 77.6245) is None

    conn.hset.assert_not_called()


@pytest.mark.asyncio
async def test_reverse_geocode_out_of_range():
    assert await maps.reverse_geocode(123.0, 77.0) is None


@pytest.mark.asyncio
async def test_forward_geocode_lat_lng_text_is_local():
    http = _http_returning([])
    with patch("cityprodrivers.services.maps._get_http", return_value=http):
        result = await maps.forward_geocode("12.9352, 77.6245")

    assert result == {"address": "12.9352, 77.6245", "lat": 12.9352, "lng": 77.6245}
    http.get.assert_not_called()


@pytest.mark.asyncio
async def test_forward_geocode_search():
    conn = AsyncMock()
    conn.hgetall.return_value = {}
    http = _http_returning([{"display_name": "Indiranagar, Bengaluru", "lat": "12.97", "lon": "77.64"}])

    with patch("cityprodrivers.services.maps._get_redis", return_value=conn), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        result = await maps.forward_geocode("Indiranagar")

    assert result == {"address": "Indiranagar, Bengaluru", "lat": 12.97, "lng": 77.64}
    conn.hset.assert_called_once()


@pytest.mark.asyncio
async def test_forward_geocode_no_match():
    conn = AsyncMock()
    conn.hgetall.return_value = {}
    http = _http_returning([])

    with patch("cityprodrivers.services.maps._get_redis", return_value=conn), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        assert await maps.forward_geocode("nowhere at all") is None


@pytest.mark.asyncio
async def test_cache_outage_still_geocodes():
    broken = AsyncMock()
    broken.hgetall.side_effect = ConnectionError("redis down")
    broken.hset.side_effect = ConnectionError("redis down")
    http = _http_returning({"display_name": "HSR Layout"})

    with patch("cityprodrivers.services.maps._get_redis", return_value=broken), \
         patch("cityprodrivers.services.maps._get_http", return_value=http):
        assert await maps.reverse_geocode(12.91, 77.64) == "HSR Layout"


def test_query_hash_normalizes():
    assert maps._query_hash("  Koramangala   5th Block ") == maps._query_hash("koramangala 5th block")
