"""Cache keys: (entity type, optional parent id)."""
from __future__ import annotations

from planmap.client.cache import QueryKey

MINDMAPS = "mindmaps"
NODES = "nodes"
EDGES = "edges"


def mindmaps_key() -> QueryKey:
    return (MINDMAPS,)


def mindmap_key(mindmap_id: str) -> QueryKey:
    return (MINDMAPS, mindmap_id)


def nodes_key(mindmap_id: str | None = None) -> QueryKey:
    return (NODES, mindmap_id) if mindmap_id else (NODES,)


def edges_key(mindmap_id: str | None = None) -> QueryKey:
    return (EDGES, mindmap_id) if mindmap_id else (EDGES,)
