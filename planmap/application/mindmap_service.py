"""Mindmap use cases for the current user."""
from __future__ import annotations

from typing import List

from planmap.application.access_service import MindmapAccessService
from planmap.application.validation_service import mindmap_patch_fields
from planmap.domain.defaults import DEFAULT_MINDMAP_TITLE
from planmap.db.models import Mindmap
from planmap.db.repositories import MindmapRepository
from planmap.domain.events import MindmapCreated, MindmapDeleted, event_publisher
from planmap.schemas.api_schemas import MindmapCreate, MindmapPatch


class MindmapService:
    def __init__(self, mindmaps: MindmapRepository, access: MindmapAccessService) -> None:
        self._mindmaps = mindmaps
        self._access = access

    def list_mindmaps(self, user_id: str) -> List[Mindmap]:
        return self._mindmaps.get_user_mindmaps(user_id)

    def create_mindmap(self, user_id: str, data: MindmapCreate) -> Mindmap:
        title = (data.title or "").strip() or DEFAULT_MINDMAP_TITLE
        mindmap = self._mindmaps.create_mindmap(
            user_id=user_id,
            title=title,
            description=data.description,
            viewport=data.viewport.model_dump() if data.viewport else None,
            settings=data.settings,
        )
        event_publisher.publish(MindmapCreated(
            event_id="",
            timestamp=None,
            aggregate_id=mindmap.id,
            user_id=user_id,
            title=mindmap.title,
        ))
        return mindmap

    def get_mindmap(self, user_id: str, mindmap_id: str) -> Mindmap:
        """The mindmap with its nodes and edges loaded."""
        return self._access.require_mindmap(mindmap_id, user_id, with_graph=True)

    def update_mindmap(self, user_id: str, mindmap_id: str, patch: MindmapPatch) -> Mindmap:
        mindmap = self._access.require_mindmap(mindmap_id, user_id)
        fields = mindmap_patch_fields(patch)
        if not fields:
            return mindmap
        return self._mindmaps.update_mindmap(mindmap, fields)

    def delete_mindmap(self, user_id: str, mindmap_id: str) -> None:
        mindmap = self._access.require_mindmap(mindmap_id, user_id)
        title = mindmap.title
        self._mindmaps.delete_mindmap(mindmap)
        event_publisher.publish(MindmapDeleted(
            event_id="",
            timestamp=None,
            aggregate_id=mindmap_id,
            user_id=user_id,
            title=title,
        ))
