"""Mindmap reads and mutations."""
from __future__ import annotations

from typing import Any, Dict, List

from planmap.client.keys import edges_key, mindmap_key, mindmaps_key, nodes_key
from planmap.client.query_client import Mutation, OptimisticContext, QueryClient
from planmap.client.records import merge_record, swap_placeholder, temp_id, utc_now_iso
from planmap.domain.defaults import DEFAULT_MINDMAP_TITLE

# Freshness windows in seconds
LIST_STALE_TIME = 5 * 60
DETAIL_STALE_TIME = 2 * 60


class MindmapQueries:
    def __init__(self, client: QueryClient) -> None:
        self._client = client
        api = client.api
        self.create = Mutation(
            client, api.create_mindmap,
            on_mutate=self._optimistic_create,
            on_success=self._confirm_create,
        )
        self.update = Mutation(
            client,
            lambda variables: api.update_mindmap(variables["id"], variables["data"]),
            on_mutate=self._optimistic_update,
        )
        self.delete = Mutation(
            client, api.delete_mindmap,
            on_mutate=self._optimistic_delete,
            on_success=self._forget_graph,
        )

    async def list(self) -> List[Dict[str, Any]]:
        return await self._client.fetch_query(mindmaps_key(), self._client.api.list_mindmaps, LIST_STALE_TIME)

    async def get(self, mindmap_id: str) -> Dict[str, Any]:
        """The mindmap with nested ``nodes`` and ``edges``."""
        return await self._client.fetch_query(
            mindmap_key(mindmap_id),
            lambda: self._client.api.get_mindmap(mindmap_id),
            DETAIL_STALE_TIME,
        )

    def _optimistic_create(self, data: Dict[str, Any]) -> OptimisticContext:
        cache = self._client.cache
        context = OptimisticContext(invalidate=[mindmaps_key()])
        previous = cache.get(mindmaps_key())
        if previous is not None:
            context.snapshots.append(cache.snapshot(mindmaps_key()))
            context.placeholder_id = temp_id()
            placeholder = {
                "id": context.placeholder_id,
                "user_id": "temp-user",
                "title": data.get("title") or DEFAULT_MINDMAP_TITLE,
                "description": data.get("description"),
                "viewport": data.get("viewport"),
                "settings": data.get("settings"),
                "created_at": utc_now_iso(),
                "updated_at": utc_now_iso(),
            }
            cache.set(mindmaps_key(), [*previous, placeholder])
        return context

    def _confirm_create(self, mindmap: Dict[str, Any], data: Dict[str, Any], context: OptimisticContext) -> None:
        previous = self._client.cache.get(mindmaps_key())
        if previous is not None:
            self._client.cache.set(mindmaps_key(), swap_placeholder(previous, context.placeholder_id, mindmap))

    def _optimistic_update(self, variables: Dict[str, Any]) -> OptimisticContext:
        cache = self._client.cache
        mindmap_id, data = variables["id"], variables["data"]
        context = OptimisticContext(invalidate=[mindmaps_key(), mindmap_key(mindmap_id)])
        previous = cache.get(mindmaps_key())
        if previous is not None:
            context.snapshots.append(cache.snapshot(mindmaps_key()))
            cache.set(mindmaps_key(), [
                merge_record(item, data) if item["id"] == mindmap_id else item
                for item in previous
            ])
        detail = cache.get(mindmap_key(mindmap_id))
        if detail is not None:
            context.snapshots.append(cache.snapshot(mindmap_key(mindmap_id)))
            cache.set(mindmap_key(mindmap_id), merge_record(detail, data))
        return context

    def _optimistic_delete(self, mindmap_id: str) -> OptimisticContext:
        cache = self._client.cache
        context = OptimisticContext(invalidate=[mindmaps_key()])
        previous = cache.get(mindmaps_key())
        if previous is not None:
            context.snapshots.append(cache.snapshot(mindmaps_key()))
            cache.set(mindmaps_key(), [item for item in previous if item["id"] != mindmap_id])
        return context

    def _forget_graph(self, result: Any, mindmap_id: str, context: OptimisticContext) -> None:
        cache = self._client.cache
        cache.remove(mindmap_key(mindmap_id))
        cache.remove(nodes_key(mindmap_id))
        cache.remove(edges_key(mindmap_id))
