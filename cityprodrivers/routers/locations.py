"""Location picker lookups for the booking form."""

from fastapi import APIRouter, Query

from cityprodrivers.exceptions import GatewayError
from cityprodrivers.schemas import LocationResult
from cityprodrivers.services import maps

router = APIRouter()


@router.get("/reverse", response_model=LocationResult)
async def reverse(lat: float = Query(..., ge=-90, le=90), lng: float = Query(..., ge=-180, le=180)):
    """Address for a dropped pin. `address` is null when the lookup failed."""
    return LocationResult(address=await maps.reverse_geocode(lat, lng), lat=lat, lng=lng)


@router.get("/search", response_model=LocationResult)
async def search(q: str = Query(..., min_length=1)):
    result = await maps.forward_geocode(q)
    if result is None:
        raise GatewayError(f"No match for \"{q}\".", title="Location not found", status_code=404)
    return LocationResult(**result)


@router.get("/default", response_model=LocationResult)
async def default_center():
    lat, lng = maps.DEFAULT_CENTER
    return LocationResult(address=None, lat=lat, lng=lng)
