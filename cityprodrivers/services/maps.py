"""
Location picker backend — reverse and forward geocoding via Nominatim (OSM).

Optimization strategy:
  1. Geocode cache in Redis (30-day TTL)
  2. "lat,lng" text (from a dropped pin) is answered without a lookup

Both lookups are best-effort: any failure is logged and returns None so the
picker simply keeps its previous value.
"""

import hashlib
import logging

import httpx
import redis.asyncio as aioredis

from cityprodrivers.config import settings

logger = logging.getLogger(__name__)

_redis: aioredis.Redis | None = None
_http: httpx.AsyncClient | None = None

# Map opens on Chennai until the browser reports a position
DEFAULT_CENTER = (13.0827, 80.2707)

GEOCODE_CACHE_TTL = 30 * 24 * 3600   # 30 days


async def _get_redis() -> aioredis.Redis:
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis


async def _get_http() -> httpx.AsyncClient:
    global _http
    if _http is None:
        _http = httpx.AsyncClient(
            timeout=10.0,
            headers={"User-Agent": settings.GEOCODE_USER_AGENT},
        )
    return _http


async def close() -> None:
    global _redis, _http
    if _http is not None:
        await _http.aclose()
        _http = None
    if _redis is not None:
        await _redis.aclose()
        _redis = None


def _query_hash(query: str) -> str:
    """Normalize and hash a search text for cache key."""
    normalized = " ".join(query.strip().lower().split())
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def _latlng_key(lat: float, lng: float) -> str:
    """Round to 5 decimals (~1 m) for the reverse cache key."""
    return f"{lat:.5f},{lng:.5f}"


def _parse_lat_lng(text: str) -> tuple[float, float] | None:
    """Parse 'lat,lng' text (e.g. copied from a map pin)."""
    if not text or "," not in text:
        return None
    parts = text.strip().split(",", 1)
    try:
        lat, lng = float(parts[0].strip()), float(parts[1].strip())
        if -90 <= lat <= 90 and -180 <= lng <= 180:
            return (lat, lng)
    except ValueError:
        pass
    return None


async def _cache_get(key: str) -> dict | None:
    if not settings.GEOCODE_CACHE_ENABLED:
        return None
    try:
        r = await _get_redis()
        cached = await r.hgetall(key)
    except Exception as e:
        logger.warning("Geocode cache read failed: %s", e)
        return None
    return cached or None


async def _cache_set(key: str, mapping: dict) -> None:
    if not settings.GEOCODE_CACHE_ENABLED:
        return
    try:
        r = await _get_redis()
        await r.hset(key, mapping=mapping)
        await r.expire(key, GEOCODE_CACHE_TTL)
    except Exception as e:
        logger.warning("Geocode cache write failed: %s", e)


# ── Reverse geocoding ──────────────────────────────────────

async def reverse_geocode(lat: float, lng: float) -> str | None:
    """
    Turn a map position into a display address.

    Returns:
        Free-text address, or None when the lookup failed
    """
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None

    cache_key = f"revgeo:{_latlng_key(lat, lng)}"
    cached = await _cache_get(cache_key)
    if cached and cached.get("address"):
        return cached["address"]

    try:
        http = await _get_http()
        resp = await http.get(
            f"{settings.NOMINATIM_URL}/reverse",
            params={"format": "json", "lat": lat, "lon": lng, "addressdetails": 1},
        )
        data = resp.json()
    except Exception as e:
        logger.warning("Reverse geocode failed for %s,%s: %s", lat, lng, e)
        return None

    address = data.get("display_name") if isinstance(data, dict) else None
    if not address:
        return None

    await _cache_set(cache_key, {"address": address})
    return address


# ── Forward geocoding ──────────────────────────────────────

async def forward_geocode(query: str) -> dict | None:
    """
    Best match for a search text.

    Returns:
        {"address": str, "lat": float, "lng": float} or None
    """
    if not query or not query.strip():
        return None

    coords = _parse_lat_lng(query)
    if coords is not None:
        return {"address": query.strip(), "lat": coords[0], "lng": coords[1]}

    cache_key = f"geo:{_query_hash(query)}"
    cached = await _cache_get(cache_key)
    if cached and "lat" in cached:
        return {
            "address": cached.get("address", query),
            "lat": float(cached["lat"]),
            "lng": float(cached["lng"]),
        }

    try:
        http = await _get_http()
        resp = await http.get(
            f"{settings.NOMINATIM_URL}/search",
            params={"format": "json", "q": query.strip(), "limit": 1},
        )
        hits = resp.json()
        if not hits:
            return None
        result = {
            "address": hits[0].get("display_name", query),
            "lat": float(hits[0]["lat"]),
            "lng": float(hits[0]["lon"]),
        }
    except Exception as e:
        logger.warning("Forward geocode failed for %r: %s", query, e)
        return None

    await _cache_set(cache_key, {
        "address": result["address"],
        "lat": str(result["lat"]),
        "lng": str(result["lng"]),
    })
    return result
