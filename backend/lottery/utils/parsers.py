from typing import Any


def _parse_int_optional(value: Any) -> int | None:
    """Lenient int parse for cookie/query values; garbage reads as missing."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    cleaned = str(value).strip()
    if not cleaned:
        return None
    try:
        return int(cleaned)
    except ValueError:
        return None


def _parse_index(value: Any) -> Any:
    """Tile index from a JSON body: ints and digit strings become int, anything else passes through."""
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value
