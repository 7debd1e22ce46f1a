"""Edge use cases; endpoints must be nodes of the same mindmap."""
from __future__ import annotations

from typing import List

from planmap.application.access_service import MindmapAccessService
from planmap.application.validation_service import validate_edge_type
from planmap.db.models import Edge
from planmap.db.repositories import EdgeRepository, NodeRepository
from planmap.domain.defaults import generate_edge_flow_id
from planmap.domain.errors import ConflictError, ValidationError
from planmap.domain.events import EdgeCreated, EdgeDeleted, event_publisher
from planmap.schemas.api_schemas import EdgeCreate

class EdgeService:
    def __init__(self, edges: EdgeRepository, nodes: NodeRepository, access: MindmapAccessService) -> None:
        self._edges = edges
        self._nodes = nodes
        self._access = access

    def list_edges(self, user_id: str, mindmap_id: str | None) -> List[Edge]:
        mindmap = self._access.require_mindmap(mindmap_id, user_id)
        return self._edges.get_mindmap_edges(mindmap.id)

    def validate_endpoints(self, mindmap_id: str, source_node_id: str, target_node_id: str) -> None:
        """Raise ValidationError unless both endpoints are distinct nodes of the mindmap."""
        if source_node_id == target_node_id:
            raise ValidationError("An edge cannot connect a node to itself")
        found = self._nodes.get_react_flow_ids(mindmap_id, [source_node_id, target_node_id])
        if found != {source_node_id, target_node_id}:
            raise ValidationError("Source or target node not found in this mindmap")

    def create_edge(self, user_id: str, data: EdgeCreate) -> Edge:
        if not data.mindmap_id or not data.source_node_id or not data.target_node_id:
            raise ValidationError("mindmap_id, source_node_id, and target_node_id are required")
        mindmap = self._access.require_mindmap(data.mindmap_id, user_id)
        self.validate_endpoints(mindmap.id, data.source_node_id, data.target_node_id)

        react_flow_id = data.react_flow_id or generate_edge_flow_id(data.source_node_id, data.target_node_id)
        if self._edges.get_edge_by_react_flow_id(react_flow_id, mindmap_id=mindmap.id):
            raise ConflictError(f"Edge '{react_flow_id}' already exists in this mindmap")

        edge = self._edges.create_edge(
            mindmap_id=mindmap.id,
            react_flow_id=react_flow_id,
            source_node_id=data.source_node_id,
            target_node_id=data.target_node_id,
            edge_type=validate_edge_type(data.type),
            style=data.style,
            data=data.data,
        )
        event_publisher.publish(EdgeCreated(
            event_id="",
            timestamp=None,
            aggregate_id=edge.id,
            mindmap_id=mindmap.id,
            source_node_id=edge.source_node_id,
            target_node_id=edge.target_node_id,
        ))
        return edge

    def delete_edge(
        self,
        user_id: str,
        edge_id: str | None = None,
        react_flow_id: str | None = None,
        mindmap_id: str | None = None,
    ) -> None:
        edge = self._access.require_edge(user_id, edge_id=edge_id, react_flow_id=react_flow_id, mindmap_id=mindmap_id)
        mindmap_id, deleted_id = edge.mindmap_id, edge.id
        self._edges.delete_edge(edge)
        event_publisher.publish(EdgeDeleted(
            event_id="",
            timestamp=None,
            aggregate_id=deleted_id,
            mindmap_id=mindmap_id,
        ))
