"""Percent-encoding of individual purl components."""

import re
from urllib.parse import quote, unquote

PERCENT_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")

# Escapes turned back into literal text after quoting, in order.
_CANONICAL_UNESCAPES = (
    ("%3A", ":"),
    ("%2F", "/"),
    ("+", "%20"),
)


def encode_component(value: str) -> str:
    """Percent-encodes a component as UTF-8, keeping ':' and '/' literal.

    Args:
        value: The decoded component.

    Returns:
        The canonical encoded form, with spaces rendered as '%20'.
    """
    encoded = quote(value, safe="")
    for escaped, literal in _CANONICAL_UNESCAPES:
        encoded = encoded.replace(escaped, literal)
    return encoded


def decode_component(value: str) -> str:
    """Decodes '%XX' escapes as UTF-8. A literal '+' is kept as '+'.

    Raises:
        UnicodeDecodeError: If the escapes do not form valid UTF-8.
    """
    return unquote(value, errors="strict")


def has_percent_escape(value: str) -> bool:
    return PERCENT_ESCAPE.search(value) is not None
