"""String splitting helpers shared by the decoder and the encoder."""

from typing import List, Optional, Tuple

LEFT = "left"
RIGHT = "right"


def split_once(string: str, separator: str, side: str = LEFT) -> Optional[Tuple[str, str]]:
    """Splits `string` once on `separator`.

    Scanning from the left, the value is the text before the leftmost
    separator. Scanning from the right, the value is the text after the
    rightmost separator. The remainder is the other side in both cases.

    Args:
        string: The string to split.
        separator: The separator to look for.
        side: `LEFT` or `RIGHT`.

    Returns:
        A `(value, remainder)` tuple, or None if the separator is absent.
    """
    if side == LEFT:
        value, found, remainder = string.partition(separator)
    elif side == RIGHT:
        remainder, found, value = string.rpartition(separator)
    else:
        raise ValueError(f"Invalid side '{side}'. Allowed values: '{LEFT}', '{RIGHT}'.")

    if not found:
        return None
    return value, remainder


def strip(string: str, char: str) -> str:
    """Removes at most one leading and one trailing `char`."""
    return string.removeprefix(char).removesuffix(char)


def segments(string: str) -> List[str]:
    """Splits a path-like string on '/' after stripping one leading and trailing '/'.

    Empty, '.' and '..' entries are returned as-is; callers filter them.
    """
    return strip(string, "/").split("/")


def segment_present(segment: str) -> bool:
    return segment not in ("", ".", "..")
