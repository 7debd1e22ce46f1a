"""Service for ownership checks on mindmaps and their nodes and edges."""
from __future__ import annotations

from planmap.db.models import Edge, Mindmap, Node
from planmap.db.repositories import EdgeRepository, MindmapRepository, NodeRepository
from planmap.domain.errors import ForbiddenError, NotFoundError, ValidationError


class MindmapAccessService:
    """Centralizes ownership validation to avoid controller duplication.

    A mindmap the caller does not own is reported as missing, so its
    existence never leaks. Nodes and edges are looked up first and only then
    checked against the caller, which yields ``ForbiddenError`` when the
    parent mindmap belongs to someone else.
    """

    def __init__(self, mindmaps: MindmapRepository, nodes: NodeRepository, edges: EdgeRepository) -> None:
        self._mindmaps = mindmaps
        self._nodes = nodes
        self._edges = edges

    def require_mindmap(self, mindmap_id: str | None, user_id: str, with_graph: bool = False) -> Mindmap:
        """Raise NotFoundError if the mindmap doesn't exist or isn't owned by the user."""
        if not mindmap_id:
            raise ValidationError("mindmap_id is required")
        mindmap = self._mindmaps.get_user_mindmap(mindmap_id, user_id, with_graph=with_graph)
        if not mindmap:
            raise NotFoundError("Mindmap not found")
        return mindmap

    def require_node(self, node_id: str, user_id: str) -> Node:
        """Raise NotFoundError if the node doesn't exist, ForbiddenError if not owned."""
        node = self._nodes.get_node(node_id)
        if not node:
            raise NotFoundError("Node not found")
        self._require_owner(node.mindmap_id, user_id)
        return node

    def require_edge(
        self,
        user_id: str,
        edge_id: str | None = None,
        react_flow_id: str | None = None,
        mindmap_id: str | None = None,
    ) -> Edge:
        """Look an edge up by id or canvas id and check its mindmap's owner.

        Canvas ids repeat across mindmaps, so that lookup only searches the
        caller's own mindmaps (optionally just ``mindmap_id``); other users'
        edges are reported as missing.
        """
        if edge_id:
            edge = self._edges.get_edge(edge_id)
        elif react_flow_id:
            edge = self._edges.get_edge_by_react_flow_id(react_flow_id, mindmap_id=mindmap_id, user_id=user_id)
        else:
            raise ValidationError("Either id or react_flow_id is required")
        if not edge:
            raise NotFoundError("Edge not found")
        self._require_owner(edge.mindmap_id, user_id)
        return edge

    def _require_owner(self, mindmap_id: str, user_id: str) -> None:
        if not self._mindmaps.get_user_mindmap(mindmap_id, user_id):
            raise ForbiddenError("Unauthorized")
