from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from planmap.auth import decode_access_token
from planmap.db.database import get_db
from planmap.db.repositories import EdgeRepository, MindmapRepository, NodeRepository, UserRepository
from planmap.domain.errors import UnauthorizedError
from planmap.application.access_service import MindmapAccessService
from planmap.application.auth_service import AuthService
from planmap.application.mindmap_service import MindmapService
from planmap.application.node_service import NodeService
from planmap.application.edge_service import EdgeService


def get_current_user_id(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> str:
    """Resolve the ``Authorization: Bearer <token>`` header to a user id."""
    if not authorization:
        raise UnauthorizedError("Unauthorized")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Unauthorized")
    payload = decode_access_token(token.strip())
    user_id = payload["sub"]
    # Tokens outlive deleted accounts
    if not UserRepository(db).get_user(user_id):
        raise UnauthorizedError("Unauthorized")
    return user_id


def get_access_service(db: Session = Depends(get_db)) -> MindmapAccessService:
    return MindmapAccessService(
        mindmaps=MindmapRepository(db),
        nodes=NodeRepository(db),
        edges=EdgeRepository(db),
    )


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(users=UserRepository(db))


def get_mindmap_service(
    db: Session = Depends(get_db),
    access: MindmapAccessService = Depends(get_access_service),
) -> MindmapService:
    return MindmapService(mindmaps=MindmapRepository(db), access=access)


def get_node_service(
    db: Session = Depends(get_db),
    access: MindmapAccessService = Depends(get_access_service),
) -> NodeService:
    return NodeService(nodes=NodeRepository(db), access=access)


def get_edge_service(
    db: Session = Depends(get_db),
    access: MindmapAccessService = Depends(get_access_service),
) -> EdgeService:
    return EdgeService(edges=EdgeRepository(db), nodes=NodeRepository(db), access=access)
