"""Incoming message domain entity."""

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4


@dataclass
class Message:
    """A request handed to the dispatcher.

    Attributes:
        owner_id: Scope the request runs under (also the cache owner)
        text: Raw text of the request
        actions: Intent signal, the action names the request asks for
        source: Provenance tag copied onto responses (e.g. "discord", "api")
        content: Free-form structured content
        id: Message identifier
    """

    owner_id: str
    text: str = ""
    actions: list[str] = field(default_factory=list)
    source: str | None = None
    content: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
