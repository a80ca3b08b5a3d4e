"""Exception hierarchy for graphbridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GraphBridgeError(Exception):
    """Base class for bridge errors with structured payloads."""

    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.details:
            return f"{base} :: {self.details}"
        return base


class UnsupportedOperationError(GraphBridgeError):
    """Raised when a message names no operation, or one the producer cannot perform."""


class UnsupportedBodyError(GraphBridgeError):
    """Raised when the message body does not fit the requested operation."""


class NodeNotFoundError(GraphBridgeError):
    """Raised when a relationship endpoint does not exist in the store."""


class EntityMappingError(GraphBridgeError):
    """Raised when a mapped entity cannot be resolved to a stored node."""


class InvalidRelationshipTypeError(GraphBridgeError):
    """Raised when a relationship type label cannot be used in Cypher."""


class MessageDecodeError(GraphBridgeError):
    """Raised when an inbound payload is not a valid exchange document."""


class ReplyDeliveryError(GraphBridgeError):
    """Raised when a reply could not be written to the reply topic."""
