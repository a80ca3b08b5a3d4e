"""Producer that turns exchanges into graph operations."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from graphbridge.core.exceptions import UnsupportedBodyError, UnsupportedOperationError
from graphbridge.graph.template import GraphTemplate
from graphbridge.models import BasicRelationship, EntityRelationship, Exchange, GraphOperation, Message
from graphbridge.utils.monitoring import observe_operation

if TYPE_CHECKING:
    from graphbridge.orchestration.endpoint import GraphEndpoint

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class GraphProducer:
    """Reads the operation header of an exchange and runs it on the template."""

    def __init__(self, endpoint: "GraphEndpoint", template: GraphTemplate) -> None:
        self.endpoint = endpoint
        self.template = template

    def process(self, exchange: Exchange) -> None:
        message = exchange.get_in()
        raw_operation = message.get_header(self.endpoint.HEADER_OPERATION)
        operation = GraphOperation.resolve(raw_operation)
        if operation is None:
            observe_operation("UNKNOWN", "rejected", 0.0)
            raise UnsupportedOperationError(
                error_code="UNSUPPORTED_OPERATION",
                message="No supported graph operation specified.",
                details={"operation": repr(raw_operation)},
            )

        started = time.perf_counter()
        with tracer.start_as_current_span("graph.dispatch") as span:
            span.set_attribute("graph.operation", operation.name)
            span.set_attribute("messaging.exchange_id", exchange.exchange_id)
            try:
                if operation is GraphOperation.CREATE_NODE:
                    self._create_node(message)
                else:
                    self._create_relationship(message)
            except Exception:
                observe_operation(operation.name, "error", time.perf_counter() - started)
                raise
        observe_operation(operation.name, "success", time.perf_counter() - started)

    def _create_node(self, message: Message) -> None:
        body = message.get_body()
        if body is None or body == "":
            node = self.template.create_node()
        elif isinstance(body, Mapping):
            node = self.template.create_node(body)
        else:
            raise UnsupportedBodyError(
                error_code="UNSUPPORTED_BODY",
                message="Node creation expects an empty body or a property mapping.",
                details={"body_type": type(body).__name__},
            )
        logger.debug("Created node %s", node.id)
        message.set_header(self.endpoint.HEADER_NODE_ID, node.id)

    def _create_relationship(self, message: Message) -> None:
        body: Any = message.get_body()
        if isinstance(body, BasicRelationship):
            relationship = self.template.create_relationship_between(body.start, body.end, body.type, None)
        elif isinstance(body, EntityRelationship):
            relationship = self.template.create_entity_relationship_between(
                body.start,
                body.end,
                body.entity_class,
                body.type,
                body.allow_duplicates,
            )
        else:
            raise UnsupportedBodyError(
                error_code="UNSUPPORTED_BODY",
                message="Relationship creation expects a BasicRelationship or EntityRelationship body.",
                details={"body_type": type(body).__name__},
            )
        logger.debug("Created relationship %s", relationship.id)
        message.set_header(self.endpoint.HEADER_RELATIONSHIP_ID, relationship.id)
