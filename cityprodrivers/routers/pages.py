"""Customer-facing site content."""

from fastapi import APIRouter

from cityprodrivers import content
from cityprodrivers.services.booking import booking_options

router = APIRouter()


@router.get("/home")
async def home():
    return {**content.HOME, "services": [s["title"] for s in content.SERVICES]}


@router.get("/services")
async def services():
    return {
        "title": "Professional Driving Solutions",
        "description": (
            "From hourly trips to permanent placements, we offer comprehensive driving "
            "services tailored to your needs."
        ),
        "services": content.SERVICES,
        "booking_options": booking_options(),
    }


@router.get("/about")
async def about():
    return content.ABOUT


@router.get("/terms")
async def terms():
    return content.TERMS
