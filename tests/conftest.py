"""Shared test doubles: in-memory gateway, FSM contexts, manual clock."""

import asyncio
import itertools

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from cityprodrivers.exceptions import AuthError, GatewayError
from cityprodrivers.services.gateway import RemoteGateway

VALID_CODE = "123456"


class FakeGateway(RemoteGateway):
    """RemoteGateway backed by dicts. Set `failures[method]` to make a call raise."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {"profiles": {}, "bookings": {}}
        self.accounts: dict[str, tuple[str, str]] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self._ids = itertools.count(1)

    def _call(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def add_account(self, email: str, password: str, role: str = "customer", **profile) -> dict:
        user_id = profile.pop("id", f"user-{next(self._ids)}")
        self.accounts[email] = (password, user_id)
        row = {"id": user_id, "email": email, "name": "Test User", "role": role, **profile}
        self.tables["profiles"][user_id] = row
        return row

    # ── Authentication ─────────────────────────────────────

    async def sign_up(self, email, password, role, name, phone=""):
        self._call("sign_up", email, role)
        if email in self.accounts:
            raise AuthError("User already registered")
        return dict(self.add_account(email, password, role, name=name, phone=phone, is_verified=False))

    async def sign_in(self, email, password):
        self._call("sign_in", email)
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")
        return dict(self.tables["profiles"][account[1]])

    async def send_otp(self, email):
        self._call("send_otp", email)

    async def verify_otp(self, email, code):
        self._call("verify_otp", email, code)
        if code != VALID_CODE:
            raise AuthError("Token has expired or is invalid")

    async def request_password_reset(self, email):
        self._call("request_password_reset", email)

    async def reset_password(self, email, code, new_password):
        self._call("reset_password", email, code)
        if code != VALID_CODE:
            raise AuthError("Reset code is invalid or has expired.")
        self.accounts[email] = (new_password, self.accounts[email][1])

    # ── Records ────────────────────────────────────────────

    async def select(self, table, filters=None, order_by=None, descending=False):
        self._call("select", table)
        rows = [dict(row) for row in self.tables[table].values()]
        for column, value in (filters or {}).items():
            op, value = value if isinstance(value, tuple) else ("eq", value)
            if op == "eq":
                rows = [r for r in rows if r.get(column) == value]
            elif op == "gte":
                rows = [r for r in rows if str(r.get(column) or "") >= str(value)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    async def get(self, table, record_id):
        self._call("get", table, record_id)
        row = self.tables[table].get(record_id)
        return dict(row) if row else None

    async def insert(self, table, values):
        self._call("insert", table)
        row = dict(values)
        row.setdefault("id", f"{table}-{next(self._ids)}")
        self.tables[table][row["id"]] = row
        return dict(row)

    async def update(self, table, record_id, values):
        self._call("update", table, record_id, values)
        if record_id not in self.tables[table]:
            raise GatewayError(f"No {table} record with id {record_id}.")
        self.tables[table][record_id].update(values)
        return dict(self.tables[table][record_id])


class ManualClock:
    """Stand-in for asyncio.sleep; ticks only when the test advances it."""

    def __init__(self):
        self._pending: list[asyncio.Future] = []

    async def sleep(self, delay: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        await future

    async def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            await asyncio.sleep(0)
            pending, self._pending = self._pending, []
            for future in pending:
                if not future.done():
                    future.set_result(None)
            await asyncio.sleep(0)


def make_state(destiny: str = "default", storage: MemoryStorage | None = None) -> FSMContext:
    return FSMContext(
        storage=storage or MemoryStorage(),
        key=StorageKey(bot_id=0, chat_id=1, user_id=1, destiny=destiny),
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def clock():
    return ManualClock()
