from unittest.mock import MagicMock, patch

import pytest

from graphbridge.core.config import Settings
from graphbridge.core.database import DatabaseManager
from graphbridge.graph.template import GraphTemplate
from graphbridge.models import GraphOperation
from graphbridge.orchestration.endpoint import GraphEndpoint


@pytest.mark.parametrize(
    "uri, expected",
    [
        ("neo4j:bolt://graph:7687", "bolt://graph:7687"),
        ("neo4j:neo4j+s://graph:7687", "neo4j+s://graph:7687"),
        ("neo4j://graph:7687", "neo4j://graph:7687"),
        ("bolt://graph:7687", "bolt://graph:7687"),
    ],
)
def test_driver_uri(uri, expected):
    assert GraphEndpoint(uri=uri, database=MagicMock()).driver_uri == expected


def test_default_uri_comes_from_settings():
    endpoint = GraphEndpoint(settings=Settings(NEO4J_URI="bolt://db:7687"), database=MagicMock())

    assert endpoint.uri.startswith("neo4j:bolt://db:7687")
    assert endpoint.driver_uri.startswith("bolt://db:7687")


def test_create_producer_wires_template_from_database_manager():
    database = MagicMock()
    endpoint = GraphEndpoint(
        uri="neo4j:bolt://graph:7687",
        settings=Settings(NEO4J_DATABASE="people"),
        database=database,
    )

    producer = endpoint.create_producer()

    database.initialize.assert_called_once_with("bolt://graph:7687")
    assert isinstance(producer.template, GraphTemplate)
    assert producer.endpoint is endpoint


def test_operation_header_resolution():
    assert GraphOperation.resolve(GraphOperation.CREATE_NODE) is GraphOperation.CREATE_NODE
    assert GraphOperation.resolve(" create_relationship ") is GraphOperation.CREATE_RELATIONSHIP
    assert GraphOperation.resolve(None) is None
    assert GraphOperation.resolve("REMOVE_NODE") is None
    assert GraphOperation.resolve(1) is None


@pytest.fixture
def patched_graph_database():
    with patch("graphbridge.core.database.GraphDatabase") as graph_database:
        graph_database.driver.side_effect = lambda uri, auth: MagicMock(name=f"driver:{uri}", uri=uri)
        yield graph_database


def test_endpoints_on_different_uris_get_their_own_driver(patched_graph_database):
    database = DatabaseManager()
    first = GraphEndpoint(uri="neo4j:bolt://a:7687", database=database).create_producer()
    second = GraphEndpoint(uri="neo4j:bolt://b:7687", database=database).create_producer()

    assert first.template._driver.uri == "bolt://a:7687"
    assert second.template._driver.uri == "bolt://b:7687"
    assert patched_graph_database.driver.call_count == 2


def test_endpoints_on_the_same_uri_share_a_driver(patched_graph_database):
    database = DatabaseManager()
    first = GraphEndpoint(uri="neo4j:bolt://a:7687", database=database).create_template()
    second = GraphEndpoint(uri="neo4j:bolt://a:7687", database=database).create_template()

    assert first._driver is second._driver
    patched_graph_database.driver.assert_called_once()


def test_database_manager_closes_one_uri_or_all(patched_graph_database):
    database = DatabaseManager()
    driver_a = database.initialize("bolt://a:7687")
    driver_b = database.initialize("bolt://b:7687")

    database.close("bolt://a:7687")

    driver_a.close.assert_called_once_with()
    driver_b.close.assert_not_called()
    assert database.initialize("bolt://b:7687") is driver_b

    database.close()

    driver_b.close.assert_called_once_with()
    assert database.initialize("bolt://b:7687") is not driver_b
