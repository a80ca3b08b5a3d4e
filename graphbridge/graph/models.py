"""Graph node and relationship models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class GraphNode:
    id: int
    labels: List[str] = field(default_factory=list)
    properties: Dict[str, object] = field(default_factory=dict)


@dataclass
class GraphRelationship:
    id: int
    start_node: int
    end_node: int
    type: str
    properties: Dict[str, object] = field(default_factory=dict)
