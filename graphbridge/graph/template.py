"""Graph data-access template over the Neo4j driver."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from neo4j import Driver, ManagedTransaction, Session

from graphbridge.core.exceptions import (
    EntityMappingError,
    InvalidRelationshipTypeError,
    NodeNotFoundError,
)
from graphbridge.graph import queries
from graphbridge.graph.models import GraphNode, GraphRelationship

logger = logging.getLogger(__name__)

TYPE_PROPERTY = "__type__"


class GraphTemplate:
    """Node and relationship creation against a Neo4j database.

    Every write runs in its own managed transaction; the template keeps no
    state besides the driver and the target database name.
    """

    def __init__(self, driver: Driver, database: Optional[str] = None) -> None:
        self._driver = driver
        self._database = database

    def create_node(self, properties: Optional[Mapping[str, Any]] = None) -> GraphNode:
        """Create a node carrying `properties` (none when omitted)."""

        with self._session() as session:
            record = session.execute_write(
                _single, queries.CREATE_NODE, {"properties": dict(properties or {})}
            )
        node = _to_node(record)
        logger.debug("Created node %s", node.id)
        return node

    def get_node(self, node_id: int) -> Optional[GraphNode]:
        with self._session() as session:
            record = session.execute_read(_single, queries.GET_NODE, {"node_id": node_id})
        return _to_node(record) if record else None

    def create_relationship_between(
        self,
        start: Any,
        end: Any,
        rel_type: str,
        properties: Optional[Mapping[str, Any]],
    ) -> GraphRelationship:
        """Create a `rel_type` relationship from node `start` to node `end`.

        Endpoints are `GraphNode` instances or raw node ids.
        """

        return self._write_relationship(
            queries.CREATE_RELATIONSHIP,
            _node_id(start),
            _node_id(end),
            rel_type,
            dict(properties or {}),
        )

    def create_entity_relationship_between(
        self,
        start: Any,
        end: Any,
        entity_class: type,
        rel_type: str,
        allow_duplicates: bool,
    ) -> GraphRelationship:
        """Relate two mapped entities, tagging the relationship with `entity_class`.

        When `allow_duplicates` is false an existing relationship of the same
        type between the two nodes is returned instead of creating another.
        """

        statement = queries.CREATE_RELATIONSHIP if allow_duplicates else queries.MERGE_RELATIONSHIP
        return self._write_relationship(
            statement,
            _entity_node_id(start),
            _entity_node_id(end),
            rel_type,
            {TYPE_PROPERTY: entity_class.__name__},
        )

    def get_relationship(self, relationship_id: int) -> Optional[GraphRelationship]:
        with self._session() as session:
            record = session.execute_read(
                _single, queries.GET_RELATIONSHIP, {"relationship_id": relationship_id}
            )
        return _to_relationship(record) if record else None

    def _write_relationship(
        self,
        statement: str,
        start_id: int,
        end_id: int,
        rel_type: str,
        properties: Dict[str, Any],
    ) -> GraphRelationship:
        query = statement.format(rel_type=_escaped_type(rel_type))
        with self._session() as session:
            record = session.execute_write(
                _single,
                query,
                {"start_id": start_id, "end_id": end_id, "properties": properties},
            )
        if record is None:
            raise NodeNotFoundError(
                error_code="NODE_NOT_FOUND",
                message="Relationship endpoint does not exist.",
                details={"start": start_id, "end": end_id},
            )
        relationship = _to_relationship(record)
        logger.debug(
            "Created relationship %s (%s)-[:%s]->(%s)", relationship.id, start_id, rel_type, end_id
        )
        return relationship

    def _session(self) -> Session:
        if self._database:
            return self._driver.session(database=self._database)
        return self._driver.session()


def _single(tx: ManagedTransaction, query: str, parameters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    record = tx.run(query, parameters).single()
    return record.data() if record is not None else None


def _to_node(record: Dict[str, Any]) -> GraphNode:
    return GraphNode(
        id=record["id"],
        labels=list(record.get("labels") or []),
        properties=dict(record.get("properties") or {}),
    )


def _to_relationship(record: Dict[str, Any]) -> GraphRelationship:
    return GraphRelationship(
        id=record["id"],
        start_node=record["start_node"],
        end_node=record["end_node"],
        type=record["type"],
        properties=dict(record.get("properties") or {}),
    )


def _escaped_type(rel_type: str) -> str:
    """Escape `rel_type` for use inside a backtick-quoted Cypher name."""

    if not isinstance(rel_type, str) or not rel_type.strip() or "\x00" in rel_type:
        raise InvalidRelationshipTypeError(
            error_code="INVALID_RELATIONSHIP_TYPE",
            message="Relationship type must be a non-blank string.",
            details={"type": rel_type},
        )
    return rel_type.replace("`", "``")


def _node_id(value: Any) -> int:
    if isinstance(value, bool):
        raise NodeNotFoundError(error_code="NODE_NOT_FOUND", message="Not a node reference.")
    if isinstance(value, int):
        return value
    node_id = getattr(value, "id", None)
    if isinstance(node_id, int) and not isinstance(node_id, bool):
        return node_id
    raise NodeNotFoundError(
        error_code="NODE_NOT_FOUND",
        message="Not a node reference.",
        details={"value": repr(value)},
    )


def _entity_node_id(entity: Any) -> int:
    for attribute in ("node_id", "id"):
        node_id = getattr(entity, attribute, None)
        if isinstance(node_id, int) and not isinstance(node_id, bool):
            return node_id
    raise EntityMappingError(
        error_code="ENTITY_NOT_MAPPED",
        message="Entity exposes no stored node id.",
        details={"entity": type(entity).__name__},
    )
