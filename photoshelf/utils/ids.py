"""Identifier helpers."""

import uuid

from photoshelf.errors import InvalidInputError


def new_id() -> str:
    return str(uuid.uuid4())


def parse_id(value: str, kind: str = "id") -> str:
    """Validate a UUID identifier and return its canonical string form.

    Raises InvalidInputError before any storage access.
    """
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidInputError(f"Invalid {kind}: {value!r}")


def parse_ids(values: list[str], kind: str = "id") -> list[str]:
    """Validate a list of ids, dropping repeats but keeping first-seen order."""
    seen: dict[str, None] = {}
    for v in values:
        seen.setdefault(parse_id(v, kind), None)
    return list(seen)
