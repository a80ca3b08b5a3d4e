"""JSON encoding of exchanges travelling over Kafka."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Optional, Union

from graphbridge.core.exceptions import GraphBridgeError, MessageDecodeError
from graphbridge.models import BasicRelationship, Exchange, GraphOperation, Message
from graphbridge.orchestration.endpoint import GraphEndpoint

RELATIONSHIP_KEYS = frozenset({"start", "end", "type"})


def decode_exchange(payload: Union[bytes, str, Dict[str, Any]]) -> Exchange:
    """Build an exchange from a `{"id", "headers", "body"}` document."""

    document = payload
    if isinstance(payload, (bytes, str)):
        try:
            document = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MessageDecodeError(error_code="MALFORMED_MESSAGE", message=str(exc)) from exc

    if not isinstance(document, dict):
        raise MessageDecodeError(
            error_code="MALFORMED_MESSAGE",
            message="Exchange document must be a JSON object.",
        )

    headers = document.get("headers") or {}
    if not isinstance(headers, dict):
        raise MessageDecodeError(error_code="MALFORMED_MESSAGE", message="Headers must be an object.")

    operation = GraphOperation.resolve(headers.get(GraphEndpoint.HEADER_OPERATION))
    body = _decode_body(document.get("body"), operation)
    exchange = Exchange(in_message=Message(headers=dict(headers), body=body))
    if document.get("id"):
        exchange.exchange_id = str(document["id"])
    return exchange


def _decode_body(body: Any, operation: Optional[GraphOperation]) -> Any:
    if (
        operation is GraphOperation.CREATE_RELATIONSHIP
        and isinstance(body, dict)
        and set(body) == RELATIONSHIP_KEYS
    ):
        return BasicRelationship(start=body["start"], end=body["end"], type=body["type"])
    return body


def encode_reply(exchange: Exchange, error: Optional[GraphBridgeError] = None) -> Dict[str, Any]:
    reply: Dict[str, Any] = {
        "id": exchange.exchange_id,
        "headers": {key: _plain(value) for key, value in exchange.get_in().headers.items()},
    }
    if error is not None:
        reply["error"] = {"error_code": error.error_code, "message": error.message}
    return reply


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    return value
