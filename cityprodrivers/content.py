"""
Static site content — home, services, about, terms — and the option lists
offered by the booking form.
"""

BRAND = "City Pro Drivers"
TAGLINE = "Your Car. Our Driver. Safe Journey."
CONTACT_EMAIL = "info@driveease.in"
CONTACT_PHONE = "+91 98765 43210"

# ── Booking options ────────────────────────────────────────

SERVICE_TYPES = {
    "hourly": {"label": "Hourly / Acting Driver", "desc": "For short trips & errands"},
    "daily": {"label": "Daily / Full-Day Driver", "desc": "8-12 hour packages"},
    "weekly": {"label": "Weekly Driver", "desc": "7-day booking"},
    "monthly": {"label": "Monthly Driver", "desc": "30-day commitment"},
    "outstation": {"label": "Outstation Driver", "desc": "Long-distance trips"},
}

TRIP_TYPES = {
    "inside-city": "Inside City",
    "outstation": "Outstation",
}

CAR_TYPES = ["hatchback", "sedan", "suv", "muv", "luxury", "traveller"]

# ── Pages ──────────────────────────────────────────────────

SERVICES = [
    {
        "title": "Hourly / Acting Drivers",
        "description": (
            "Need a driver for a few hours? Our acting drivers are available on an hourly "
            "basis for short trips, shopping, medical appointments or any occasion where "
            "you need a professional behind the wheel."
        ),
        "price": "Starting from ₹150/hour",
    },
    {
        "title": "Daily & Full-Day Drivers",
        "description": (
            "Book a driver for your entire day without worrying about hourly charges. "
            "Perfect for business meetings, weddings and city tours."
        ),
        "price": "Starting from ₹1,200/day",
    },
    {
        "title": "Weekly & Monthly Drivers",
        "description": (
            "Long-term driver solutions for extended travel, monthly office commutes or "
            "temporary requirements, with the same trusted driver."
        ),
        "price": "Custom packages available",
    },
    {
        "title": "Permanent Drivers",
        "description": (
            "Hire a verified, permanent driver for your household or business. We handle "
            "recruitment, verification and placement."
        ),
        "price": "Contact for placement fees",
    },
    {
        "title": "Outstation Drivers",
        "description": (
            "Planning a road trip? Our experienced drivers take you safely to your "
            "destination in your own car."
        ),
        "price": "Based on distance",
    },
    {
        "title": "Yellow Board Cars with Drivers",
        "description": (
            "Commercial vehicles with licensed professional drivers for business transport "
            "or any requirement needing a registered commercial vehicle."
        ),
        "price": "Custom quotes",
    },
    {
        "title": "Valet Parking Services",
        "description": (
            "Professional valets for events, restaurants, hotels and corporate functions."
        ),
        "price": "Event-based pricing",
    },
]

HOME = {
    "brand": BRAND,
    "tagline": TAGLINE,
    "headline": "Professional drivers for your own car, when you need them.",
    "highlights": [
        "Background-verified drivers",
        "Hourly, daily, monthly and outstation plans",
        "Book in under a minute over WhatsApp",
    ],
    "cta": {"label": "Book a Driver", "path": "/booking"},
}

ABOUT = {
    "title": f"About {BRAND}",
    "mission": (
        "We connect car owners with trained, verified professional drivers so every "
        "journey is safe, punctual and stress-free."
    ),
    "values": [
        {"title": "Safety First", "text": "Every driver is licence-checked and ID-verified."},
        {"title": "Reliability", "text": "Drivers arrive on time, every time."},
        {"title": "Transparency", "text": "Clear pricing with no hidden charges."},
    ],
}

TERMS = {
    "title": "Terms & Conditions",
    "sections": [
        {
            "heading": "Bookings",
            "text": (
                "A booking request is confirmed only after our team contacts you. "
                "Submitting the form does not guarantee driver availability."
            ),
        },
        {
            "heading": "Vehicle responsibility",
            "text": (
                "The customer provides a roadworthy, insured vehicle with valid documents. "
                "Drivers may refuse to drive a vehicle they consider unsafe."
            ),
        },
        {
            "heading": "Cancellations",
            "text": "Cancellations made less than two hours before the trip may be charged.",
        },
        {
            "heading": "Driver verification",
            "text": (
                "Drivers submit licence, Aadhaar, PAN and bank account documents, which "
                "are reviewed before they can accept bookings."
            ),
        },
    ],
    "contact": {"email": CONTACT_EMAIL, "phone": CONTACT_PHONE},
}
