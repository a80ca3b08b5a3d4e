from .exchange import Exchange, Message
from .operation import GraphOperation
from .relationship import BasicRelationship, EntityRelationship

__all__ = [
    "BasicRelationship",
    "EntityRelationship",
    "Exchange",
    "GraphOperation",
    "Message",
]
