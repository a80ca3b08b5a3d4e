from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class GraphOperation(Enum):
    CREATE_NODE = "CREATE_NODE"
    CREATE_RELATIONSHIP = "CREATE_RELATIONSHIP"

    @classmethod
    def resolve(cls, value: Any) -> Optional["GraphOperation"]:
        """Map a header value onto an operation, or None when it names none."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None
