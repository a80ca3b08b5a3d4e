"""Route integration-pipeline messages onto Neo4j graph operations."""

__version__ = "0.1.0"
