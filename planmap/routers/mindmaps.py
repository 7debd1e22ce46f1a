from fastapi import APIRouter, Depends
from planmap.schemas.api_schemas import MindmapCreate, MindmapPatch, MindmapResponse, MindmapDetail
from planmap.dependencies import get_current_user_id, get_mindmap_service
from planmap.application.mindmap_service import MindmapService
from typing import Any, Dict, List

router = APIRouter()

@router.get("/api/mindmaps", response_model=List[MindmapResponse])
def list_mindmaps(
    user_id: str = Depends(get_current_user_id),
    mindmap_svc: MindmapService = Depends(get_mindmap_service),
):
    """
    List the current user's mindmaps, oldest first.
    """
    return mindmap_svc.list_mindmaps(user_id)

@router.post("/api/mindmaps", response_model=MindmapResponse, status_code=201)
def create_mindmap(
    body: MindmapCreate,
    user_id: str = Depends(get_current_user_id),
    mindmap_svc: MindmapService = Depends(get_mindmap_service),
):
    """
    Create a new mindmap owned by the current user.
    """
    return mindmap_svc.create_mindmap(user_id, body)

@router.get("/api/mindmaps/{mindmap_id}", response_model=MindmapDetail)
def get_mindmap(
    mindmap_id: str,
    user_id: str = Depends(get_current_user_id),
    mindmap_svc: MindmapService = Depends(get_mindmap_service),
):
    """
    Fetch a mindmap with its nodes and edges nested.
    """
    return mindmap_svc.get_mindmap(user_id, mindmap_id)

@router.put("/api/mindmaps/{mindmap_id}", response_model=MindmapResponse)
def update_mindmap(
    mindmap_id: str,
    body: MindmapPatch,
    user_id: str = Depends(get_current_user_id),
    mindmap_svc: MindmapService = Depends(get_mindmap_service),
):
    """
    Update title, description, viewport and/or settings.
    """
    return mindmap_svc.update_mindmap(user_id, mindmap_id, body)

@router.delete("/api/mindmaps/{mindmap_id}")
def delete_mindmap(
    mindmap_id: str,
    user_id: str = Depends(get_current_user_id),
    mindmap_svc: MindmapService = Depends(get_mindmap_service),
) -> Dict[str, Any]:
    """
    Delete a mindmap and all its nodes and edges.
    """
    mindmap_svc.delete_mindmap(user_id, mindmap_id)
    return {"success": True, "message": "Mindmap deleted successfully"}
