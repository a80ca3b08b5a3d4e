"""Endpoint configuration for the Neo4j component."""

from __future__ import annotations

import logging
from typing import Optional

from graphbridge.core.config import Settings, settings as default_settings
from graphbridge.core.database import DatabaseManager, database_manager
from graphbridge.graph.template import GraphTemplate
from graphbridge.orchestration.producer import GraphProducer

logger = logging.getLogger(__name__)

URI_SCHEME = "neo4j:"


class GraphEndpoint:
    """A `neo4j:<driver-uri>` endpoint that hands out producers."""

    HEADER_OPERATION = "Neo4jOperation"
    HEADER_NODE_ID = "Neo4jNodeId"
    HEADER_RELATIONSHIP_ID = "Neo4jRelationshipId"

    def __init__(
        self,
        uri: Optional[str] = None,
        settings: Optional[Settings] = None,
        database: Optional[DatabaseManager] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.uri = uri or self.settings.ENDPOINT_URI or f"{URI_SCHEME}{self.settings.NEO4J_URI}"
        self.database = database or database_manager

    @property
    def driver_uri(self) -> str:
        """Driver URI addressed by this endpoint."""

        if self.uri.startswith(URI_SCHEME):
            remainder = self.uri[len(URI_SCHEME):]
            # "neo4j://host" is itself a driver URI, "neo4j:bolt://host" is prefixed
            if not remainder.startswith("//"):
                return remainder
        return self.uri

    def create_template(self) -> GraphTemplate:
        driver = self.database.initialize(self.driver_uri)
        return GraphTemplate(driver, database=self.settings.NEO4J_DATABASE)

    def create_producer(self, template: Optional[GraphTemplate] = None) -> GraphProducer:
        logger.info("Creating producer for endpoint %s", self.uri)
        return GraphProducer(self, template or self.create_template())
