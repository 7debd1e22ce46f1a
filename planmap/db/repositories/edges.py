from sqlalchemy.orm import Session
from planmap.db.models import Edge, Mindmap
from typing import Dict, List, Optional

class EdgeRepository:
    """Repository for edge operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create_edge(self, mindmap_id: str, react_flow_id: str, source_node_id: str,
                    target_node_id: str, edge_type: str = "default",
                    style: Dict = None, data: Dict = None) -> Edge:
        """
        Create a new edge between nodes.
        
        Args:
            mindmap_id: Mindmap ID
            react_flow_id: Client-generated canvas ID
            source_node_id: Canvas ID of the source node
            target_node_id: Canvas ID of the target node
            edge_type: Edge type (e.g., 'smoothstep')
            style: Style map (optional)
            data: Data map (optional)
            
        Returns:
            Created edge
        """
        edge = Edge(
            mindmap_id=mindmap_id,
            react_flow_id=react_flow_id,
            source_node_id=source_node_id,
            target_node_id=target_node_id,
            type=edge_type,
            style=style,
            data=data,
        )
        self.db.add(edge)
        self.db.commit()
        self.db.refresh(edge)
        return edge
    
    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self.db.query(Edge).filter(Edge.id == edge_id).first()
    
    def get_edge_by_react_flow_id(self, react_flow_id: str, mindmap_id: str = None,
                                  user_id: str = None) -> Optional[Edge]:
        """
        Find an edge by canvas ID. Canvas IDs are only unique per mindmap, so
        narrow the search by mindmap and/or by the owner of the mindmap.
        """
        query = self.db.query(Edge).filter(Edge.react_flow_id == react_flow_id)
        if mindmap_id:
            query = query.filter(Edge.mindmap_id == mindmap_id)
        if user_id:
            query = query.join(Mindmap, Mindmap.id == Edge.mindmap_id).filter(Mindmap.user_id == user_id)
        return query.order_by(Edge.created_at.asc()).first()
    
    def get_mindmap_edges(self, mindmap_id: str) -> List[Edge]:
        """
        Get all edges in a mindmap, oldest first.
        
        Args:
            mindmap_id: Mindmap ID
            
        Returns:
            List of edges in the mindmap
        """
        return (
            self.db.query(Edge)
            .filter(Edge.mindmap_id == mindmap_id)
            .order_by(Edge.created_at.asc())
            .all()
        )
    
    def delete_edge(self, edge: Edge) -> None:
        self.db.delete(edge)
        self.db.commit()
