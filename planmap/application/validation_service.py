"""Field-by-field validation of create and partial-update payloads."""
from __future__ import annotations

from typing import Any, Dict, Iterable

from planmap.domain.errors import ValidationError
from planmap.domain.progress import clamp_progress
from planmap.domain.defaults import DEFAULT_EDGE_TYPE, EDGE_TYPES
from planmap.schemas.api_schemas import MindmapPatch, NodePatch

# Columns that may never be written as NULL
_NODE_REQUIRED = {"title", "progress", "position", "type"}


def validate_title(title: Any, entity: str = "Node") -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(f"{entity} title is required and cannot be empty")
    return title.strip()


def validate_node_type(node_type: Any) -> str:
    if not isinstance(node_type, str) or not node_type.strip():
        raise ValidationError("Node type cannot be empty")
    return node_type.strip()


def validate_edge_type(edge_type: Any) -> str:
    if edge_type is None or edge_type == "":
        return DEFAULT_EDGE_TYPE
    if edge_type not in EDGE_TYPES:
        raise ValidationError(f"Unknown edge type '{edge_type}'; expected one of {', '.join(EDGE_TYPES)}")
    return edge_type


def node_patch_fields(patch: NodePatch, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """Return the column values carried by a node patch, validated one field at a time."""
    fields: Dict[str, Any] = {}
    for name, value in patch.model_dump(exclude_unset=True, exclude=set(exclude)).items():
        if value is None and name in _NODE_REQUIRED:
            raise ValidationError(f"Node {name} cannot be null")
        if name == "title":
            value = validate_title(value)
        elif name == "progress":
            value = clamp_progress(value)
        elif name == "type":
            value = validate_node_type(value)
        fields[name] = value
    return fields


def mindmap_patch_fields(patch: MindmapPatch) -> Dict[str, Any]:
    """Return the column values carried by a mindmap patch."""
    fields: Dict[str, Any] = {}
    for name, value in patch.model_dump(exclude_unset=True).items():
        if name == "title":
            value = validate_title(value, entity="Mindmap")
        fields[name] = value
    return fields
