"""Command envelope and queue publisher shared by the UI server and runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from queue import Queue
from typing import Any, Optional


@dataclass(frozen=True)
class UICommand:
    """Validated-shape command received from a dashboard client."""
    type: str
    payload: dict[str, Any] = field(default_factory=dict)
    client: Optional[str] = None


class CommandQueuePublisher:
    """Pushes UI commands onto the runtime queue from any thread."""

    def __init__(self, queue: Queue):
        self._queue = queue

    def publish(self, command_type: str, payload: dict[str, Any], client: Optional[str] = None) -> None:
        self._queue.put(UICommand(type=command_type, payload=dict(payload), client=client))
