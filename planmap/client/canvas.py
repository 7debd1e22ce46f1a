"""Render model for the canvas: records in, flow nodes and edges out."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from planmap.domain.defaults import DEFAULT_EDGE_TYPE, STUDY_NODE_TYPE
from planmap.domain.progress import progress_color, progress_level


@dataclass
class FlowNode:
    id: str
    position: Dict[str, float]
    data: Dict[str, Any] = field(default_factory=dict)
    type: str = STUDY_NODE_TYPE


@dataclass
class FlowEdge:
    id: str
    source: str
    target: str
    type: str = DEFAULT_EDGE_TYPE


def to_flow_nodes(
    records: Iterable[Dict[str, Any]],
    positions: Optional[Mapping[str, Dict[str, float]]] = None,
) -> List[FlowNode]:
    """Flow nodes keyed by ``react_flow_id``.

    ``positions`` maps record ids to positions that override the stored ones,
    e.g. drags not saved yet.
    """
    positions = positions or {}
    flow_nodes = []
    for record in records:
        progress = record.get("progress") or 0
        flow_nodes.append(FlowNode(
            id=record["react_flow_id"],
            position=dict(positions.get(record["id"], record["position"])),
            data={
                "node_id": record["id"],
                "title": record["title"],
                "content": record.get("content") or "",
                "progress": progress,
                "level": progress_level(progress),
                "color": progress_color(progress)["color"],
            },
        ))
    return flow_nodes


def to_flow_edges(records: Iterable[Dict[str, Any]]) -> List[FlowEdge]:
    return [
        FlowEdge(
            id=record["react_flow_id"],
            source=record["source_node_id"],
            target=record["target_node_id"],
            type=record.get("type") or DEFAULT_EDGE_TYPE,
        )
        for record in records
    ]
