"""Message and exchange containers passed through the bridge."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Message:
    headers: Dict[str, Any] = field(default_factory=dict)
    body: Any = None

    def get_header(self, name: str, default: Any = None) -> Any:
        return self.headers.get(name, default)

    def set_header(self, name: str, value: Any) -> None:
        self.headers[name] = value

    def get_body(self) -> Any:
        return self.body


@dataclass
class Exchange:
    in_message: Message = field(default_factory=Message)
    exchange_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    properties: Dict[str, Any] = field(default_factory=dict)

    def get_in(self) -> Message:
        return self.in_message

    @classmethod
    def of(cls, body: Any = None, headers: Optional[Dict[str, Any]] = None) -> "Exchange":
        return cls(in_message=Message(headers=dict(headers or {}), body=body))
