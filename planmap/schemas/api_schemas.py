"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the PlanMap API.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Any
from datetime import datetime

# Geometry
class Position(BaseModel):
    x: float = Field(..., description="Canvas x coordinate")
    y: float = Field(..., description="Canvas y coordinate")

class Viewport(BaseModel):
    x: float = Field(0.0, description="Horizontal pan offset")
    y: float = Field(0.0, description="Vertical pan offset")
    zoom: float = Field(1.0, gt=0, description="Zoom factor")

# Auth schemas
class SignupRequest(BaseModel):
    email: str = Field(..., description="Login e-mail", min_length=3, max_length=255)
    password: str = Field(..., description="Plain-text password", min_length=6, max_length=255)
    username: Optional[str] = Field(None, description="Display name", max_length=255)

class LoginRequest(BaseModel):
    email: str = Field(..., description="Login e-mail")
    password: str = Field(..., description="Plain-text password")

class TokenResponse(BaseModel):
    access_token: str = Field(..., description="Bearer token for the Authorization header")
    token_type: str = Field(default="bearer", description="Token scheme")
    user_id: str = Field(..., description="ID of the authenticated user")

# Profile schemas
class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ProfilePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=2048)

# Mindmap schemas
class MindmapCreate(BaseModel):
    title: Optional[str] = Field(None, description="Title; a default is used when omitted", max_length=255)
    description: Optional[str] = Field(None, description="Optional description", max_length=1000)
    viewport: Optional[Viewport] = Field(None, description="Initial viewport")
    settings: Optional[Dict[str, Any]] = Field(None, description="Free-form settings")

class MindmapPatch(BaseModel):
    """Partial update: only fields present in the request body are written."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    viewport: Optional[Viewport] = None
    settings: Optional[Dict[str, Any]] = None

class NodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    mindmap_id: str
    react_flow_id: str
    type: str
    title: str
    content: Optional[str] = None
    progress: int
    position: Position
    style: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

class EdgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    mindmap_id: str
    react_flow_id: str
    source_node_id: str
    target_node_id: str
    type: str
    style: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

class MindmapResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    viewport: Optional[Viewport] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

class MindmapDetail(MindmapResponse):
    nodes: List[NodeResponse] = Field(default_factory=list)
    edges: List[EdgeResponse] = Field(default_factory=list)

# Node schemas
class NodeCreate(BaseModel):
    mindmap_id: str = Field(..., description="ID of the parent mindmap")
    react_flow_id: Optional[str] = Field(None, description="Canvas ID; generated when omitted")
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    progress: Optional[float] = Field(None, description="Percentage, clamped to 0-100")
    position: Optional[Position] = None
    type: Optional[str] = None
    style: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None

class NodePatch(BaseModel):
    """Partial update: only fields present in the request body are written."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    progress: Optional[float] = None
    position: Optional[Position] = None
    type: Optional[str] = None
    style: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None

class NodeBulkItem(NodePatch):
    id: str = Field(..., description="ID of the node to update")

class NodeBulkUpdate(BaseModel):
    nodes: List[NodeBulkItem] = Field(..., description="Per-node partial updates")

# Edge schemas
class EdgeCreate(BaseModel):
    mindmap_id: Optional[str] = Field(None, description="ID of the parent mindmap")
    react_flow_id: Optional[str] = Field(None, description="Canvas ID; generated when omitted")
    source_node_id: Optional[str] = Field(None, description="Canvas ID of the source node")
    target_node_id: Optional[str] = Field(None, description="Canvas ID of the target node")
    type: Optional[str] = None
    style: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None

class SuccessResponse(BaseModel):
    success: bool = Field(default=True, description="Whether the operation was successful")
