from fastapi import APIRouter, Depends, Query
from planmap.schemas.api_schemas import EdgeCreate, EdgeResponse, SuccessResponse
from planmap.dependencies import get_current_user_id, get_edge_service
from planmap.application.edge_service import EdgeService
from typing import List, Optional

router = APIRouter()

@router.get("/api/edges", response_model=List[EdgeResponse])
def list_edges(
    mindmap_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    edge_svc: EdgeService = Depends(get_edge_service),
):
    """
    List the edges of a mindmap, oldest first.
    """
    return edge_svc.list_edges(user_id, mindmap_id)

@router.post("/api/edges", response_model=EdgeResponse, status_code=201)
def create_edge(
    body: EdgeCreate,
    user_id: str = Depends(get_current_user_id),
    edge_svc: EdgeService = Depends(get_edge_service),
):
    """
    Connect two nodes of the same mindmap.
    """
    return edge_svc.create_edge(user_id, body)

@router.delete("/api/edges", response_model=SuccessResponse)
def delete_edge(
    id: Optional[str] = Query(None),
    react_flow_id: Optional[str] = Query(None),
    mindmap_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    edge_svc: EdgeService = Depends(get_edge_service),
):
    """
    Delete an edge by its id or by its canvas id, optionally within one mindmap.
    """
    edge_svc.delete_edge(user_id, edge_id=id, react_flow_id=react_flow_id, mindmap_id=mindmap_id)
    return SuccessResponse(success=True)
