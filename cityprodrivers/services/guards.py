"""In-flight guard: at most one outstanding remote call per control."""

import logging

from cityprodrivers.exceptions import StateError

logger = logging.getLogger(__name__)


class InFlight:
    """
    Async context manager wrapping a single control's remote call.

    Entering while a call is pending raises StateError instead of issuing a
    duplicate request. The flag is cleared on exit whatever the outcome.
    """

    def __init__(self, name: str = "action"):
        self.name = name
        self.active = False

    async def __aenter__(self) -> "InFlight":
        if self.active:
            logger.info("Rejected duplicate %s while one is in flight", self.name)
            raise StateError("Please wait for the current request to finish.", title="Still working")
        self.active = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.active = False
