from fastapi import APIRouter, Depends, Query
from planmap.schemas.api_schemas import NodeCreate, NodePatch, NodeBulkUpdate, NodeResponse, SuccessResponse
from planmap.dependencies import get_current_user_id, get_node_service
from planmap.application.node_service import NodeService
from typing import List, Optional

router = APIRouter()

@router.get("/api/nodes", response_model=List[NodeResponse])
def list_nodes(
    mindmap_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    node_svc: NodeService = Depends(get_node_service),
):
    """
    List the nodes of a mindmap, oldest first.
    """
    return node_svc.list_nodes(user_id, mindmap_id)

@router.post("/api/nodes", response_model=NodeResponse, status_code=201)
def create_node(
    body: NodeCreate,
    user_id: str = Depends(get_current_user_id),
    node_svc: NodeService = Depends(get_node_service),
):
    """
    Create a node; title, position, type and progress fall back to defaults.
    """
    return node_svc.create_node(user_id, body)

# Declared before /api/nodes/{node_id} so "bulk" is not captured as an id
@router.put("/api/nodes/bulk", response_model=List[NodeResponse])
def bulk_update_nodes(
    body: NodeBulkUpdate,
    user_id: str = Depends(get_current_user_id),
    node_svc: NodeService = Depends(get_node_service),
):
    """
    Update many nodes (typically positions from autosave) in one call.
    """
    return node_svc.bulk_update(user_id, body.nodes)

@router.put("/api/nodes/{node_id}", response_model=NodeResponse)
def update_node(
    node_id: str,
    body: NodePatch,
    user_id: str = Depends(get_current_user_id),
    node_svc: NodeService = Depends(get_node_service),
):
    """
    Update the fields present in the body; progress is clamped to 0-100.
    """
    return node_svc.update_node(user_id, node_id, body)

@router.delete("/api/nodes/{node_id}", response_model=SuccessResponse)
def delete_node(
    node_id: str,
    user_id: str = Depends(get_current_user_id),
    node_svc: NodeService = Depends(get_node_service),
):
    """
    Delete a node together with the edges attached to it.
    """
    node_svc.delete_node(user_id, node_id)
    return SuccessResponse(success=True)
