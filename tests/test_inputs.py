"""Tests for input normalisation helpers."""

from cityprodrivers.services.inputs import digits_only, is_blank, is_email


def test_digits_only_strips_and_truncates():
    """Phone edits keep digits only, at most 10 of them."""
    assert digits_only("+91 98765-43210", 10) == "9198765432"
    assert digits_only("98a76", 10) == "9876"


def test_digits_only_idempotent():
    """Filtering an already filtered value changes nothing."""
    for raw in ("12 34 56 78", "abc", "9876543210999", ""):
        once = digits_only(raw, 10)
        assert digits_only(once, 10) == once
        assert len(once) <= 10


def test_digits_only_none_and_numbers():
    assert digits_only(None, 6) == ""
    assert digits_only(1234567, 6) == "123456"


def test_is_email():
    assert is_email("asha@example.com")
    assert is_email("  asha@example.com ")
    assert not is_email("asha@")
    assert not is_email("")
    assert not is_email(None)


def test_is_blank():
    assert is_blank(None)
    assert is_blank("   ")
    assert not is_blank("Koramangala")
