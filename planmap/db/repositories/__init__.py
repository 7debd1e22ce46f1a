from planmap.db.repositories.users import UserRepository
from planmap.db.repositories.mindmaps import MindmapRepository
from planmap.db.repositories.nodes import NodeRepository
from planmap.db.repositories.edges import EdgeRepository

__all__ = ['UserRepository', 'MindmapRepository', 'NodeRepository', 'EdgeRepository']
