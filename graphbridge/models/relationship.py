"""Relationship descriptions carried in message bodies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BasicRelationship:
    """Relationship between two store nodes (`GraphNode` or raw node id)."""

    start: Any
    end: Any
    type: str


@dataclass(frozen=True)
class EntityRelationship:
    """Relationship between two mapped entities.

    `entity_class` names the relationship entity type recorded on the stored
    relationship. With `allow_duplicates` false an existing relationship of
    the same type between the pair is reused.
    """

    start: Any
    end: Any
    entity_class: type
    type: str
    allow_duplicates: bool = True
