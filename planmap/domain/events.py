"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str
    timestamp: datetime
    aggregate_id: str
    
    def __post_init__(self):
        if not self.event_id:
            self.event_id = str(uuid4())
        if not self.timestamp:
            self.timestamp = datetime.now()


@dataclass
class UserRegistered(DomainEvent):
    """Raised when a new identity signs up."""
    email: str


@dataclass
class MindmapCreated(DomainEvent):
    """Raised when a new mindmap is created."""
    user_id: str
    title: str


@dataclass
class MindmapDeleted(DomainEvent):
    """Raised when a mindmap (and its graph) is deleted."""
    user_id: str
    title: str


@dataclass
class NodeCreated(DomainEvent):
    mindmap_id: str
    react_flow_id: str
    title: str


@dataclass
class NodeDeleted(DomainEvent):
    mindmap_id: str
    react_flow_id: str


@dataclass
class NodesBulkUpdated(DomainEvent):
    """Raised once per bulk update call (autosave batches)."""
    mindmap_ids: List[str] = field(default_factory=list)
    node_ids: List[str] = field(default_factory=list)


@dataclass
class EdgeCreated(DomainEvent):
    mindmap_id: str
    source_node_id: str
    target_node_id: str


@dataclass
class EdgeDeleted(DomainEvent):
    mindmap_id: str


class DomainEventPublisher:
    """Singleton publisher for domain events."""
    
    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance
    
    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
    
    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        for handler in self._subscribers.get(type(event), []):
            try:
                handler(event)
            except Exception:
                # Handler failures never fail the main operation
                logger.exception(f"Event handler error for {type(event).__name__}")
    
    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
