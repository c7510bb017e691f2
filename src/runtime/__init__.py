"""Runtime engine exports."""

from .contracts import CommandQueuePublisher, UICommand
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks

__all__ = [
    "CommandQueuePublisher",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "RuntimeHooks",
    "UICommand",
]
