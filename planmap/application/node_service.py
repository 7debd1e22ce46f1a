"""Node use cases, including the batched position update used by autosave."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from planmap.application.access_service import MindmapAccessService
from planmap.application.validation_service import (
    node_patch_fields,
    validate_node_type,
    validate_title,
)
from planmap.db.models import Node
from planmap.db.repositories import NodeRepository
from planmap.domain.defaults import DEFAULT_NODE_TITLE, DEFAULT_NODE_TYPE, generate_node_flow_id
from planmap.domain.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from planmap.domain.events import NodeCreated, NodeDeleted, NodesBulkUpdated, event_publisher
from planmap.domain.progress import clamp_progress
from planmap.schemas.api_schemas import NodeBulkItem, NodeCreate, NodePatch

logger = logging.getLogger(__name__)

class NodeService:
    def __init__(self, nodes: NodeRepository, access: MindmapAccessService) -> None:
        self._nodes = nodes
        self._access = access

    def list_nodes(self, user_id: str, mindmap_id: str | None) -> List[Node]:
        mindmap = self._access.require_mindmap(mindmap_id, user_id)
        return self._nodes.get_mindmap_nodes(mindmap.id)

    def create_node(self, user_id: str, data: NodeCreate) -> Node:
        mindmap = self._access.require_mindmap(data.mindmap_id, user_id)
        react_flow_id = data.react_flow_id or generate_node_flow_id()
        if self._nodes.get_react_flow_ids(mindmap.id, [react_flow_id]):
            raise ConflictError(f"Node '{react_flow_id}' already exists in this mindmap")

        title = validate_title(data.title) if data.title else DEFAULT_NODE_TITLE
        node = self._nodes.create_node(
            mindmap_id=mindmap.id,
            react_flow_id=react_flow_id,
            title=title,
            position=data.position.model_dump() if data.position else {"x": 0, "y": 0},
            node_type=validate_node_type(data.type) if data.type else DEFAULT_NODE_TYPE,
            content=data.content or "",
            progress=clamp_progress(data.progress or 0),
            style=data.style,
            data=data.data,
        )
        event_publisher.publish(NodeCreated(
            event_id="",
            timestamp=None,
            aggregate_id=node.id,
            mindmap_id=mindmap.id,
            react_flow_id=node.react_flow_id,
            title=node.title,
        ))
        return node

    def update_node(self, user_id: str, node_id: str, patch: NodePatch) -> Node:
        node = self._access.require_node(node_id, user_id)
        fields = node_patch_fields(patch)
        if not fields:
            raise ValidationError("At least one field is required for node update")
        return self._nodes.update_node(node, fields)

    def bulk_update(self, user_id: str, items: List[NodeBulkItem]) -> List[Node]:
        """Validate every item, check ownership for every node, then write in one transaction.

        Repeated ids are merged in request order, so the last value for a field wins.
        """
        if not items:
            return []

        merged: Dict[str, Dict[str, Any]] = {}
        for item in items:
            merged.setdefault(item.id, {}).update(node_patch_fields(item, exclude={"id"}))

        nodes = {node.id: node for node in self._nodes.get_nodes(merged.keys())}
        missing = [node_id for node_id in merged if node_id not in nodes]
        if missing:
            raise NotFoundError(f"Node not found: {', '.join(missing)}")

        owned: Dict[str, bool] = {}
        for node in nodes.values():
            if node.mindmap_id not in owned:
                try:
                    self._access.require_mindmap(node.mindmap_id, user_id)
                    owned[node.mindmap_id] = True
                except NotFoundError:
                    owned[node.mindmap_id] = False
            if not owned[node.mindmap_id]:
                raise ForbiddenError("Unauthorized")

        updated = self._nodes.bulk_update([(nodes[node_id], fields) for node_id, fields in merged.items()])
        logger.debug(f"Bulk updated {len(updated)} node(s)")
        event_publisher.publish(NodesBulkUpdated(
            event_id="",
            timestamp=None,
            aggregate_id=updated[0].mindmap_id,
            mindmap_ids=sorted(owned),
            node_ids=[node.id for node in updated],
        ))
        return updated

    def delete_node(self, user_id: str, node_id: str) -> None:
        node = self._access.require_node(node_id, user_id)
        mindmap_id, react_flow_id = node.mindmap_id, node.react_flow_id
        self._nodes.delete_node(node)
        event_publisher.publish(NodeDeleted(
            event_id="",
            timestamp=None,
            aggregate_id=node_id,
            mindmap_id=mindmap_id,
            react_flow_id=react_flow_id,
        ))
