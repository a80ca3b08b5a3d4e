"""Cypher statements used by the graph template.

Relationship types cannot be bound as parameters, so the relationship
statements carry a backtick-quoted `{rel_type}` placeholder filled in with
the escaped type name.
"""

CREATE_NODE = """
CREATE (n)
SET n = $properties
RETURN id(n) AS id, labels(n) AS labels, properties(n) AS properties
"""

GET_NODE = """
MATCH (n)
WHERE id(n) = $node_id
RETURN id(n) AS id, labels(n) AS labels, properties(n) AS properties
"""

CREATE_RELATIONSHIP = """
MATCH (a) WHERE id(a) = $start_id
MATCH (b) WHERE id(b) = $end_id
CREATE (a)-[r:`{rel_type}`]->(b)
SET r += $properties
RETURN id(r) AS id, id(a) AS start_node, id(b) AS end_node, type(r) AS type, properties(r) AS properties
"""

MERGE_RELATIONSHIP = """
MATCH (a) WHERE id(a) = $start_id
MATCH (b) WHERE id(b) = $end_id
MERGE (a)-[r:`{rel_type}`]->(b)
ON CREATE SET r += $properties
RETURN id(r) AS id, id(a) AS start_node, id(b) AS end_node, type(r) AS type, properties(r) AS properties
"""

GET_RELATIONSHIP = """
MATCH (a)-[r]->(b)
WHERE id(r) = $relationship_id
RETURN id(r) AS id, id(a) AS start_node, id(b) AS end_node, type(r) AS type, properties(r) AS properties
"""
