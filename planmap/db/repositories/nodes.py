from sqlalchemy import or_
from sqlalchemy.orm import Session
from planmap.db.models import Node, Edge
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

class NodeRepository:
    """Repository for node operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create_node(self, mindmap_id: str, react_flow_id: str, title: str, position: Dict[str, float],
                    node_type: str = "default", content: str = None, progress: int = 0,
                    style: Dict = None, data: Dict = None) -> Node:
        """
        Create a new node in a mindmap.
        
        Args:
            mindmap_id: Mindmap ID
            react_flow_id: Client-generated canvas ID
            title: Node title
            position: Canvas position {x, y}
            node_type: Type tag
            content: Body text (optional)
            progress: Progress percentage, already clamped
            style: Style map (optional)
            data: Data map (optional)
            
        Returns:
            Created node
        """
        node = Node(
            mindmap_id=mindmap_id,
            react_flow_id=react_flow_id,
            type=node_type,
            title=title,
            content=content,
            progress=progress,
            position=position,
            style=style,
            data=data,
        )
        self.db.add(node)
        self.db.commit()
        self.db.refresh(node)
        return node
    
    def get_node(self, node_id: str) -> Optional[Node]:
        """
        Get a node by ID.
        
        Args:
            node_id: Node ID
            
        Returns:
            Node if found, None otherwise
        """
        return self.db.query(Node).filter(Node.id == node_id).first()
    
    def get_nodes(self, node_ids: Iterable[str]) -> List[Node]:
        ids = list(node_ids)
        if not ids:
            return []
        return self.db.query(Node).filter(Node.id.in_(ids)).all()
    
    def get_mindmap_nodes(self, mindmap_id: str) -> List[Node]:
        """
        Get all nodes in a mindmap, oldest first.
        
        Args:
            mindmap_id: Mindmap ID
            
        Returns:
            List of nodes in the mindmap
        """
        return (
            self.db.query(Node)
            .filter(Node.mindmap_id == mindmap_id)
            .order_by(Node.created_at.asc())
            .all()
        )
    
    def get_react_flow_ids(self, mindmap_id: str, react_flow_ids: Sequence[str]) -> set:
        """Return the subset of the given canvas IDs that exist in the mindmap."""
        rows = (
            self.db.query(Node.react_flow_id)
            .filter(Node.mindmap_id == mindmap_id, Node.react_flow_id.in_(list(react_flow_ids)))
            .all()
        )
        return {row[0] for row in rows}
    
    def update_node(self, node: Node, fields: Dict[str, Any]) -> Node:
        """
        Apply the given fields to a node.
        
        Args:
            node: Node to update
            fields: Column values keyed by column name
            
        Returns:
            Updated node
        """
        for key, value in fields.items():
            setattr(node, key, value)
        self.db.commit()
        self.db.refresh(node)
        return node
    
    def bulk_update(self, updates: Sequence[Tuple[Node, Dict[str, Any]]]) -> List[Node]:
        """
        Apply several node updates in one transaction.
        
        Args:
            updates: Pairs of (node, fields)
            
        Returns:
            Updated nodes in the order given
        """
        try:
            for node, fields in updates:
                for key, value in fields.items():
                    setattr(node, key, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for node, _ in updates:
            self.db.refresh(node)
        return [node for node, _ in updates]
    
    def delete_node(self, node: Node) -> None:
        """Delete a node and every edge that touches it."""
        self.db.query(Edge).filter(
            Edge.mindmap_id == node.mindmap_id,
            or_(Edge.source_node_id == node.react_flow_id, Edge.target_node_id == node.react_flow_id),
        ).delete(synchronize_session=False)
        self.db.delete(node)
        self.db.commit()
