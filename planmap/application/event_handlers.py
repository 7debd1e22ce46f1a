"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from planmap.domain.events import (
        UserRegistered,
        MindmapCreated,
        MindmapDeleted,
        NodeCreated,
        NodeDeleted,
        NodesBulkUpdated,
        EdgeCreated,
        EdgeDeleted,
    )

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs all domain events for audit trail."""
    
    def handle_user_registered(self, event: UserRegistered) -> None:
        logger.info(f"[AUDIT] User registered: {event.aggregate_id}")
    
    def handle_mindmap_created(self, event: MindmapCreated) -> None:
        logger.info(f"[AUDIT] Mindmap created: {event.aggregate_id} - {event.title} (user {event.user_id})")
    
    def handle_mindmap_deleted(self, event: MindmapDeleted) -> None:
        logger.info(f"[AUDIT] Mindmap deleted: {event.aggregate_id} - {event.title} (user {event.user_id})")
    
    def handle_node_created(self, event: NodeCreated) -> None:
        logger.info(f"[AUDIT] Node created: {event.react_flow_id} in mindmap {event.mindmap_id}")
    
    def handle_node_deleted(self, event: NodeDeleted) -> None:
        logger.info(f"[AUDIT] Node deleted: {event.react_flow_id} from mindmap {event.mindmap_id}")
    
    def handle_nodes_bulk_updated(self, event: NodesBulkUpdated) -> None:
        logger.info(f"[AUDIT] Bulk update of {len(event.node_ids)} node(s) in {', '.join(event.mindmap_ids)}")
    
    def handle_edge_created(self, event: EdgeCreated) -> None:
        logger.info(
            f"[AUDIT] Edge created: {event.source_node_id} -> {event.target_node_id} "
            f"in mindmap {event.mindmap_id}"
        )
    
    def handle_edge_deleted(self, event: EdgeDeleted) -> None:
        logger.info(f"[AUDIT] Edge deleted: {event.aggregate_id} from mindmap {event.mindmap_id}")


audit_handler = AuditLogHandler()


def register_event_handlers():
    """Register all event handlers with the publisher."""
    from planmap.domain.events import (
        event_publisher,
        UserRegistered,
        MindmapCreated,
        MindmapDeleted,
        NodeCreated,
        NodeDeleted,
        NodesBulkUpdated,
        EdgeCreated,
        EdgeDeleted,
    )
    
    event_publisher.subscribe(UserRegistered, audit_handler.handle_user_registered)
    event_publisher.subscribe(MindmapCreated, audit_handler.handle_mindmap_created)
    event_publisher.subscribe(MindmapDeleted, audit_handler.handle_mindmap_deleted)
    event_publisher.subscribe(NodeCreated, audit_handler.handle_node_created)
    event_publisher.subscribe(NodeDeleted, audit_handler.handle_node_deleted)
    event_publisher.subscribe(NodesBulkUpdated, audit_handler.handle_nodes_bulk_updated)
    event_publisher.subscribe(EdgeCreated, audit_handler.handle_edge_created)
    event_publisher.subscribe(EdgeDeleted, audit_handler.handle_edge_deleted)
