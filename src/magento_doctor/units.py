"""Conversions between raw values and their human-readable forms."""

import re

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(size: int | float, precision: int = 2) -> str:
    """Human-readable size: ``format_bytes(1536)`` -> ``"1.5 KB"``."""
    size = max(float(size or 0), 0.0)
    power = 0
    while size >= 1024 and power < len(_UNITS) - 1:
        size /= 1024
        power += 1
    value = round(size, precision)
    if value == int(value):
        value = int(value)
    return f"{value} {_UNITS[power]}"


def parse_bytes(value: str | int | None) -> int:
    """PHP shorthand size to bytes: ``"2G"``, ``"512M"``, ``"64k"``, ``"-1"``."""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    match = re.match(r"^\s*(-?\d+)\s*([kmgKMG]?)", str(value))
    if not match:
        return 0
    number = int(match.group(1))
    suffix = match.group(2).lower()
    multiplier = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}[suffix]
    return number * multiplier


def parse_version(value: str | None) -> tuple[int, ...]:
    """Numeric prefix of a version string: ``"8.1.2-1ubuntu"`` -> ``(8, 1, 2)``."""
    match = re.match(r"\s*v?(\d+(?:\.\d+)*)", value or "")
    if not match:
        return ()
    return tuple(int(part) for part in match.group(1).split("."))


def version_lt(value: str | None, minimum: str) -> bool:
    """True when *value* is known and older than *minimum*."""
    current = parse_version(value)
    return bool(current) and current < parse_version(minimum)


def abbreviate(items: list[str], limit: int = 3) -> str:
    """First *limit* items joined, with ``...`` when there are more."""
    text = ", ".join(str(i) for i in items[:limit])
    return text + "..." if len(items) > limit else text
