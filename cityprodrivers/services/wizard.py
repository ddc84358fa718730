"""
Multi-step form state machine shared by the booking and auth flows.

Step identifiers are aiogram `State`s; the current step and the field values
live in an aiogram `FSMContext`, so a wizard survives across requests and can
be backed by memory or Redis storage.

Rules:
  - next() only leaves a step whose predicate holds for the current fields
  - back() is always allowed except on the first step and keeps all fields
  - submit() only runs on the last step, at most once at a time
"""

import logging
from typing import Any

from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State

from cityprodrivers.exceptions import StateError, ValidationError
from cityprodrivers.services.guards import InFlight
from cityprodrivers.services.inputs import digits_only

logger = logging.getLogger(__name__)


def step_name(state: State | str) -> str:
    """'BookingFlow:schedule' → 'schedule'."""
    full = state.state if isinstance(state, State) else state
    return full.rsplit(":", 1)[-1]


class Wizard:
    name = "wizard"
    submitted: str  # full state name, e.g. "BookingFlow:submitted"
    numeric_fields: dict[str, int] = {}
    secret_fields: tuple[str, ...] = ()
    defaults: dict[str, Any] = {}

    def __init__(self, state: FSMContext, guard: InFlight | None = None):
        self.state = state
        self.guard = guard or InFlight(self.name)

    # ── Hooks ──────────────────────────────────────────────

    def steps(self, data: dict) -> tuple[State, ...]:
        """Ordered steps for the current field values."""
        raise NotImplementedError

    def is_step_valid(self, step: str, data: dict) -> bool:
        raise NotImplementedError

    def step_error(self, step: str, data: dict) -> str:
        return "Please complete this step before continuing."

    async def on_advance(self, step: str, data: dict) -> None:
        """Side effect run when leaving `step` forwards."""

    async def on_submit(self, data: dict) -> Any:
        raise NotImplementedError

    # ── State access ───────────────────────────────────────

    async def fields(self) -> dict:
        return {**self.defaults, **await self.state.get_data()}

    async def current(self) -> str:
        current = await self.state.get_state()
        if current is None:
            current = self.steps(await self.fields())[0].state
            await self.state.set_state(current)
        return current

    async def is_submitted(self) -> bool:
        return await self.current() == self.submitted

    def _index(self, current: str, steps: tuple[State, ...]) -> int:
        names = [s.state for s in steps]
        if current not in names:
            raise StateError(f"{step_name(current).replace('_', ' ').capitalize()} is not an active step.")
        return names.index(current)

    # ── Transitions ────────────────────────────────────────

    async def edit(self, **values) -> dict:
        """Store field values. Numeric fields keep digits only, truncated."""
        if await self.is_submitted():
            raise StateError("This form was already submitted. Start a new one to make changes.")
        cleaned = {}
        for key, value in values.items():
            if key in self.numeric_fields:
                value = digits_only(value, self.numeric_fields[key])
            elif isinstance(value, str):
                value = value.strip() if key not in self.secret_fields else value
            cleaned[key] = value
        data = await self.state.update_data(cleaned)
        return {**self.defaults, **data}

    async def next(self) -> str:
        current = await self.current()
        data = await self.fields()
        steps = self.steps(data)
        index = self._index(current, steps)

        if not self.is_step_valid(step_name(current), data):
            raise ValidationError(self.step_error(step_name(current), data), title="Incomplete step")
        if index == len(steps) - 1:
            return current

        async with self.guard:
            await self.on_advance(step_name(current), data)
        target = steps[index + 1].state
        await self.state.set_state(target)
        logger.debug("%s wizard: %s → %s", self.name, step_name(current), step_name(target))
        return target

    async def back(self) -> str:
        current = await self.current()
        steps = self.steps(await self.fields())
        index = self._index(current, steps)
        if index == 0:
            return current
        target = steps[index - 1].state
        await self.state.set_state(target)
        return target

    async def submit(self) -> Any:
        current = await self.current()
        data = await self.fields()
        steps = self.steps(data)
        if self._index(current, steps) != len(steps) - 1:
            raise StateError("Finish the remaining steps before submitting.")
        if not self.is_step_valid(step_name(current), data):
            raise ValidationError(self.step_error(step_name(current), data), title="Incomplete step")

        async with self.guard:
            result = await self.on_submit(data)
        await self.state.set_state(self.submitted)
        logger.info("%s wizard submitted", self.name)
        return result

    async def reset(self) -> None:
        await self.state.clear()

    async def snapshot(self) -> dict:
        """Current step, progress and public field values for rendering."""
        current = await self.current()
        data = await self.fields()
        public = {k: v for k, v in data.items() if k not in self.secret_fields}
        if current == self.submitted:
            return {
                "step": step_name(current),
                "index": None,
                "steps": [],
                "fields": public,
                "can_proceed": False,
                "submitted": True,
            }
        steps = self.steps(data)
        return {
            "step": step_name(current),
            "index": self._index(current, steps),
            "steps": [step_name(s) for s in steps],
            "fields": public,
            "can_proceed": self.is_step_valid(step_name(current), data),
            "submitted": False,
        }
