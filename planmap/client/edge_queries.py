"""Edge reads and mutations."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from planmap.client.keys import edges_key, mindmap_key
from planmap.client.query_client import Mutation, OptimisticContext, QueryClient
from planmap.client.records import swap_placeholder, temp_id, utc_now_iso
from planmap.domain.defaults import DEFAULT_EDGE_TYPE

EDGES_STALE_TIME = 30


class EdgeQueries:
    def __init__(self, client: QueryClient) -> None:
        self._client = client
        api = client.api
        self.create = Mutation(
            client, api.create_edge,
            on_mutate=self._optimistic_create,
            on_success=self._confirm_create,
        )
        self.delete = Mutation(
            client,
            lambda variables: api.delete_edge(
                edge_id=variables.get("id"),
                react_flow_id=variables.get("react_flow_id"),
                mindmap_id=variables.get("mindmap_id"),
            ),
            on_mutate=self._optimistic_delete,
        )

    async def list(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return await self._client.fetch_query(
            edges_key(mindmap_id),
            lambda: self._client.api.list_edges(mindmap_id),
            EDGES_STALE_TIME,
        )

    def cached(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return self._client.cache.get(edges_key(mindmap_id)) or []

    def _optimistic_create(self, data: Dict[str, Any]) -> OptimisticContext:
        cache = self._client.cache
        mindmap_id = data["mindmap_id"]
        key = edges_key(mindmap_id)
        context = OptimisticContext(invalidate=[key, mindmap_key(mindmap_id)])
        previous = cache.get(key)
        if previous is not None:
            context.snapshots.append(cache.snapshot(key))
            context.placeholder_id = temp_id()
            placeholder = {
                "id": context.placeholder_id,
                "mindmap_id": mindmap_id,
                "react_flow_id": data.get("react_flow_id"),
                "source_node_id": data["source_node_id"],
                "target_node_id": data["target_node_id"],
                "type": data.get("type") or DEFAULT_EDGE_TYPE,
                "style": data.get("style"),
                "data": data.get("data"),
                "created_at": utc_now_iso(),
                "updated_at": utc_now_iso(),
            }
            cache.set(key, [*previous, placeholder])
        return context

    def _confirm_create(self, edge: Dict[str, Any], data: Dict[str, Any], context: OptimisticContext) -> None:
        key = edges_key(data["mindmap_id"])
        previous = self._client.cache.get(key)
        if previous is not None:
            self._client.cache.set(key, swap_placeholder(previous, context.placeholder_id, edge))

    def _optimistic_delete(self, variables: Dict[str, Optional[str]]) -> OptimisticContext:
        """``variables`` carries either ``id`` or ``react_flow_id``, plus an optional ``mindmap_id``.

        Canvas ids repeat across mindmaps; with a ``mindmap_id`` only that
        mindmap's cached edges are touched.
        """
        cache = self._client.cache
        field = "id" if variables.get("id") else "react_flow_id"
        value = variables.get(field)
        mindmap_id = variables.get("mindmap_id")
        scope = edges_key(mindmap_id) if mindmap_id else edges_key()
        context = OptimisticContext(invalidate=[scope])
        for key, edges in cache.find_all(scope):
            if edges and any(edge.get(field) == value for edge in edges):
                context.snapshots.append(cache.snapshot(key))
                context.invalidate.append(mindmap_key(key[1]))
                cache.set(key, [edge for edge in edges if edge.get(field) != value])
        return context
