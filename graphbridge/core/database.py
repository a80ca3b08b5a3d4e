"""Neo4j connectivity layer for graphbridge."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from neo4j import Driver, GraphDatabase

from graphbridge.core.config import settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Lazily establishes one driver per graph store URI."""

    def __init__(self) -> None:
        self._drivers: Dict[str, Driver] = {}
        self._lock = threading.Lock()

    def initialize(self, uri: Optional[str] = None) -> Driver:
        """Return the driver for `uri`, connecting on first use."""

        target = uri or str(settings.NEO4J_URI)
        with self._lock:
            driver = self._drivers.get(target)
            if driver is None:
                logger.info("Connecting to Neo4j at %s", target)
                driver = GraphDatabase.driver(
                    target,
                    auth=(settings.NEO4J_USER, settings.NEO4J_PASSWORD),
                )
                self._drivers[target] = driver
        return driver

    def close(self, uri: Optional[str] = None) -> None:
        """Close the driver for `uri`, or every driver when no URI is given."""

        with self._lock:
            if uri is None:
                drivers = list(self._drivers.items())
                self._drivers.clear()
            else:
                driver = self._drivers.pop(uri, None)
                drivers = [(uri, driver)] if driver is not None else []

        for target, driver in drivers:
            logger.info("Closing Neo4j driver for %s", target)
            driver.close()


# Singleton instance shared by endpoints
database_manager = DatabaseManager()
