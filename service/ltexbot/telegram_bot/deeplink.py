"""
Deep-link payloads for /start.

Formulas are stored in t.me/<bot>?start=<payload> links as URL-safe base64
of their UTF-8 bytes, without '=' padding (Telegram allows only
A-Z, a-z, 0-9, _ and - in start parameters).
"""

import base64
import binascii
from typing import Optional


def encode_formula(formula: str) -> str:
    """Encode a formula into a /start payload."""
    encoded = base64.urlsafe_b64encode(formula.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def decode_formula(payload: str) -> Optional[str]:
    """Decode a /start payload. Returns None if it is not a valid payload."""
    padded = payload + "=" * (-len(payload) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


def build_start_link(bot_username: str, formula: str) -> str:
    """Link that opens the bot with the formula as /start payload."""
    return f"https://t.me/{bot_username}?start={encode_formula(formula)}"
