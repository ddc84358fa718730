"""Tests for the session state container (in-memory gateway)."""

import pytest

from cityprodrivers.exceptions import AuthError, StateError, ValidationError
from cityprodrivers.models.identity import UserRole
from cityprodrivers.services.session import SessionState


@pytest.mark.asyncio
async def test_sign_in_sets_identity_and_notifies(gateway):
    """Successful sign-in stores the identity and tells subscribers once."""
    gateway.add_account("asha@example.com", "secret123", role="driver", name="Asha")
    session = SessionState(gateway)
    seen = []
    session.subscribe(seen.append)

    identity = await session.sign_in("asha@example.com", "secret123")

    assert session.is_authenticated
    assert identity.role == UserRole.DRIVER
    assert identity.dashboard_path == "/driver/dashboard"
    assert seen == [identity]


@pytest.mark.asyncio
async def test_sign_in_rejected_keeps_signed_out(gateway):
    gateway.add_account("asha@example.com", "secret123")
    session = SessionState(gateway)

    with pytest.raises(AuthError):
        await session.sign_in("asha@example.com", "wrong-pass")
    assert session.identity is None


@pytest.mark.asyncio
async def test_sign_in_invalid_email_never_calls_backend(gateway):
    session = SessionState(gateway)
    with pytest.raises(ValidationError):
        await session.sign_in("not-an-email", "secret123")
    assert gateway.count("sign_in") == 0


@pytest.mark.asyncio
async def test_sign_out_idempotent(gateway):
    """Signing out twice leaves the same state and notifies once."""
    gateway.add_account("asha@example.com", "secret123")
    session = SessionState(gateway)
    await session.sign_in("asha@example.com", "secret123")
    seen = []
    session.subscribe(seen.append)

    session.sign_out()
    session.sign_out()

    assert session.identity is None
    assert seen == [None]


@pytest.mark.asyncio
async def test_sign_up_rejects_admin_and_short_password(gateway):
    session = SessionState(gateway)
    with pytest.raises(ValidationError):
        await session.sign_up("boss@example.com", "secret123", "admin", "Boss")
    with pytest.raises(ValidationError):
        await session.sign_up("asha@example.com", "short", "driver", "Asha")
    assert gateway.count("sign_up") == 0


@pytest.mark.asyncio
async def test_sign_up_creates_unverified_identity(gateway):
    session = SessionState(gateway)
    identity = await session.sign_up("asha@example.com", "secret123", "customer", "Asha", "98765 43210")
    assert identity.is_verified is False
    assert identity.phone == "9876543210"
    assert gateway.tables["profiles"][identity.id]["role"] == "customer"


def test_update_identity_without_identity(gateway):
    session = SessionState(gateway)
    with pytest.raises(StateError):
        session.update_identity(is_verified=True)


@pytest.mark.asyncio
async def test_update_identity_replaces_atomically(gateway):
    """Updates build a new identity; role can never change."""
    gateway.add_account("asha@example.com", "secret123", role="customer")
    session = SessionState(gateway)
    before = await session.sign_in("asha@example.com", "secret123")

    after = session.update_identity(is_verified=True)
    assert after is not before
    assert after.is_verified and not before.is_verified

    with pytest.raises(StateError):
        session.update_identity(role="admin")
    with pytest.raises(ValidationError):
        session.update_identity(profile_completion=150)
    assert session.identity == after


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_break_others(gateway):
    gateway.add_account("asha@example.com", "secret123")
    session = SessionState(gateway)
    seen = []

    def broken(identity):
        raise RuntimeError("boom")

    session.subscribe(broken)
    unsubscribe = session.subscribe(seen.append)
    await session.sign_in("asha@example.com", "secret123")
    unsubscribe()
    session.sign_out()

    assert len(seen) == 1
