"""Input normalisation shared by the wizards and profile forms."""

import re

PHONE_LENGTH = 10
CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 8

EMAIL_RE = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
_NON_DIGIT_RE = re.compile(r"\D")


def digits_only(value, max_length: int) -> str:
    """
    Strip every non-digit and truncate to `max_length`.

    Applied on each edit, so running it over an already filtered value
    returns it unchanged.
    """
    if value is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(value))[:max_length]


def is_email(value: str | None) -> bool:
    return bool(value) and EMAIL_RE.match(value.strip()) is not None


def is_blank(value) -> bool:
    return value is None or not str(value).strip()
