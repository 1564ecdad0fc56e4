"""
catalog/lookup.py - Bulk lookup helpers.

Bulk existence checks index the fetched entities by id and walk the
requested ids in input order, so a missing-id error always lists every
missing id, once, in the order the caller sent them.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Protocol, TypeVar


class HasId(Protocol):
    id: str


E = TypeVar("E", bound=HasId)


def unique_ids(ids: Iterable[str]) -> List[str]:
    """De-duplicate ids keeping first-seen order."""
    return list(dict.fromkeys(ids))


def index_by_id(entities: Iterable[E]) -> Dict[str, E]:
    """Build an id -> entity arena."""
    return {entity.id: entity for entity in entities}


def missing_ids(requested: Iterable[str], arena: Dict[str, E]) -> List[str]:
    """Requested ids absent from the arena, de-duplicated, in request order."""
    return [entity_id for entity_id in unique_ids(requested) if entity_id not in arena]
