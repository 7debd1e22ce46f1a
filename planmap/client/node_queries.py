"""Node reads and mutations, including the bulk update used by position autosave."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from planmap.client.cache import QueryKey
from planmap.client.keys import edges_key, mindmap_key, mindmaps_key, nodes_key
from planmap.client.query_client import Mutation, OptimisticContext, QueryClient
from planmap.client.records import find_by, replace_by_id, swap_placeholder, temp_id, utc_now_iso
from planmap.domain.defaults import DEFAULT_NODE_TITLE, DEFAULT_NODE_TYPE
from planmap.domain.progress import clamp_progress

# Short freshness window; nodes change while editing
NODES_STALE_TIME = 30


def _clamped(fields: Dict[str, Any]) -> Dict[str, Any]:
    if fields.get("progress") is not None:
        return {**fields, "progress": clamp_progress(fields["progress"])}
    return fields


class NodeQueries:
    def __init__(self, client: QueryClient) -> None:
        self._client = client
        api = client.api
        self.create = Mutation(
            client, api.create_node,
            on_mutate=self._optimistic_create,
            on_success=self._confirm_create,
        )
        self.update = Mutation(
            client,
            lambda variables: api.update_node(variables["id"], {k: v for k, v in variables.items() if k != "id"}),
            on_mutate=self._optimistic_update,
        )
        self.bulk_update = Mutation(client, api.bulk_update_nodes, on_mutate=self._optimistic_bulk_update)
        self.delete = Mutation(client, api.delete_node, on_mutate=self._optimistic_delete)

    async def list(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return await self._client.fetch_query(
            nodes_key(mindmap_id),
            lambda: self._client.api.list_nodes(mindmap_id),
            NODES_STALE_TIME,
        )

    def cached(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return self._client.cache.get(nodes_key(mindmap_id)) or []

    def _locate(self, node_ids: set) -> Tuple[Optional[QueryKey], Optional[List[Dict[str, Any]]]]:
        """Find the cached node list holding any of the given ids."""
        for key, nodes in self._client.cache.find_all(nodes_key()):
            if nodes and any(node["id"] in node_ids for node in nodes):
                return key, nodes
        return None, None

    def _optimistic_create(self, data: Dict[str, Any]) -> OptimisticContext:
        cache = self._client.cache
        mindmap_id = data["mindmap_id"]
        key = nodes_key(mindmap_id)
        context = OptimisticContext(invalidate=[key, mindmap_key(mindmap_id)])
        previous = cache.get(key)
        if previous is not None:
            context.snapshots.append(cache.snapshot(key))
            context.placeholder_id = temp_id()
            placeholder = {
                "id": context.placeholder_id,
                "mindmap_id": mindmap_id,
                "react_flow_id": data.get("react_flow_id"),
                "type": data.get("type") or DEFAULT_NODE_TYPE,
                "title": data.get("title") or DEFAULT_NODE_TITLE,
                "content": data.get("content"),
                "progress": clamp_progress(data.get("progress") or 0),
                "position": data.get("position") or {"x": 0, "y": 0},
                "style": data.get("style"),
                "data": data.get("data"),
                "created_at": utc_now_iso(),
                "updated_at": utc_now_iso(),
            }
            cache.set(key, [*previous, placeholder])
        return context

    def _confirm_create(self, node: Dict[str, Any], data: Dict[str, Any], context: OptimisticContext) -> None:
        key = nodes_key(data["mindmap_id"])
        previous = self._client.cache.get(key)
        if previous is not None:
            self._client.cache.set(key, swap_placeholder(previous, context.placeholder_id, node))

    def _optimistic_update(self, variables: Dict[str, Any]) -> OptimisticContext:
        fields = _clamped({k: v for k, v in variables.items() if k != "id"})
        return self._apply({variables["id"]: fields})

    def _optimistic_bulk_update(self, items: List[Dict[str, Any]]) -> OptimisticContext:
        updates: Dict[str, Dict[str, Any]] = {}
        for item in items:
            fields = _clamped({k: v for k, v in item.items() if k != "id"})
            updates.setdefault(item["id"], {}).update(fields)
        return self._apply(updates)

    def _apply(self, updates: Dict[str, Dict[str, Any]]) -> OptimisticContext:
        context = OptimisticContext()
        if not updates:
            return context
        key, nodes = self._locate(set(updates))
        if key is None:
            context.invalidate.append(nodes_key())
            return context
        mindmap_id = key[1]
        context.invalidate.extend([key, mindmap_key(mindmap_id)])
        context.snapshots.append(self._client.cache.snapshot(key))
        self._client.cache.set(key, replace_by_id(nodes, updates))
        return context

    def _optimistic_delete(self, node_id: str) -> OptimisticContext:
        cache = self._client.cache
        # The owning mindmap may not be cached, so refresh every node and mindmap query
        context = OptimisticContext(invalidate=[nodes_key(), mindmaps_key()])
        key, nodes = self._locate({node_id})
        if key is None:
            return context
        mindmap_id = key[1]
        node = find_by(nodes, "id", node_id)
        context.snapshots.append(cache.snapshot(key))
        cache.set(key, [item for item in nodes if item["id"] != node_id])

        edges = cache.get(edges_key(mindmap_id))
        if edges is not None:
            flow_id = node["react_flow_id"]
            context.snapshots.append(cache.snapshot(edges_key(mindmap_id)))
            context.invalidate.append(edges_key(mindmap_id))
            cache.set(edges_key(mindmap_id), [
                edge for edge in edges
                if edge["source_node_id"] != flow_id and edge["target_node_id"] != flow_id
            ])
        return context
