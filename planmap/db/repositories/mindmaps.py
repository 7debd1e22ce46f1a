from sqlalchemy.orm import Session, selectinload
from planmap.db.models import Mindmap
from typing import Dict, Any, List, Optional

class MindmapRepository:
    """Repository for mindmap operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create_mindmap(self, user_id: str, title: str, description: str = None,
                       viewport: Dict[str, float] = None, settings: Dict[str, Any] = None) -> Mindmap:
        """
        Create a new mindmap for a user.
        
        Args:
            user_id: Owner ID
            title: Mindmap title
            description: Mindmap description (optional)
            viewport: Initial viewport (optional)
            settings: Free-form settings map (optional)
            
        Returns:
            Created mindmap
        """
        mindmap = Mindmap(
            user_id=user_id,
            title=title,
            description=description,
            viewport=viewport,
            settings=settings,
        )
        self.db.add(mindmap)
        self.db.commit()
        self.db.refresh(mindmap)
        return mindmap
    
    def get_mindmap(self, mindmap_id: str) -> Optional[Mindmap]:
        """
        Get a mindmap by ID regardless of owner.
        
        Args:
            mindmap_id: Mindmap ID
            
        Returns:
            Mindmap if found, None otherwise
        """
        return self.db.query(Mindmap).filter(Mindmap.id == mindmap_id).first()
    
    def get_user_mindmap(self, mindmap_id: str, user_id: str, with_graph: bool = False) -> Optional[Mindmap]:
        """
        Get a mindmap only if it belongs to the given user.
        
        Args:
            mindmap_id: Mindmap ID
            user_id: Expected owner ID
            with_graph: Eagerly load nodes and edges
            
        Returns:
            Mindmap if found and owned, None otherwise
        """
        query = self.db.query(Mindmap)
        if with_graph:
            query = query.options(selectinload(Mindmap.nodes), selectinload(Mindmap.edges))
        return query.filter(Mindmap.id == mindmap_id, Mindmap.user_id == user_id).first()
    
    def get_user_mindmaps(self, user_id: str) -> List[Mindmap]:
        return (
            self.db.query(Mindmap)
            .filter(Mindmap.user_id == user_id)
            .order_by(Mindmap.created_at.asc())
            .all()
        )
    
    def update_mindmap(self, mindmap: Mindmap, fields: Dict[str, Any]) -> Mindmap:
        """
        Apply the given fields to a mindmap.
        
        Args:
            mindmap: Mindmap to update
            fields: Column values keyed by column name
            
        Returns:
            Updated mindmap
        """
        for key, value in fields.items():
            setattr(mindmap, key, value)
        self.db.commit()
        self.db.refresh(mindmap)
        return mindmap
    
    def delete_mindmap(self, mindmap: Mindmap) -> None:
        """Delete a mindmap; its nodes and edges go with it."""
        self.db.delete(mindmap)
        self.db.commit()
