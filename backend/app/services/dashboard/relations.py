"""Normalisation of embedded relations returned by the record store.

Depending on the query path, the store renders a to-one relation either as
an object or as a one-element list. Every read site goes through ``to_one``
so fields are only ever read from a single record or from nothing.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Union

Record = Mapping[str, Any]
Relation = Union[Record, Sequence[Record], None]


def to_one(value: Relation) -> Optional[Record]:
    """Collapse an object-or-list relation into one record or ``None``."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return None


def to_many(value: Relation) -> List[Record]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    return [item for item in value if isinstance(item, Mapping)]


def related(record: Record, relation: str) -> Optional[Record]:
    """Return the normalised to-one relation ``relation`` of ``record``."""
    return to_one(record.get(relation))


def related_field(record: Optional[Record], relation: str, field: str = "name") -> str:
    """Read ``field`` from a to-one relation, or ``""`` when it is absent."""
    if record is None:
        return ""
    target = related(record, relation)
    if target is None:
        return ""
    value = target.get(field)
    return str(value) if value is not None else ""


def full_name(user: Optional[Record]) -> str:
    if user is None:
        return ""
    parts = [user.get("first_name"), user.get("last_name")]
    return " ".join(str(part) for part in parts if part).strip()
