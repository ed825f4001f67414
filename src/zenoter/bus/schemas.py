"""Request/response envelopes carried across the storage boundary."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Request:
    request_id: str
    topic: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Response:
    request_id: str
    ok: bool
    result: Any = None
    error: str | None = None
    error_type: str | None = None


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


def build_request(topic: str, **args: Any) -> Request:
    return Request(request_id=new_request_id(), topic=topic, args=args)
