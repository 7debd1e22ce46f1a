"""Editor session for one mindmap: render model, gestures and save status."""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from planmap.client.api import ApiError
from planmap.client.autosave import AutosavePolicy, ContentAutosave, Position, PositionAutosave
from planmap.client.canvas import FlowEdge, FlowNode, to_flow_edges, to_flow_nodes
from planmap.client.keys import edges_key, nodes_key
from planmap.client.planmap_client import PlanmapClient
from planmap.client.records import find_by
from planmap.client.viewport import LocalViewportStore, Viewport, ViewportAutosave
from planmap.config import settings
from planmap.domain.defaults import (
    DEFAULT_NODE_TITLE,
    STUDY_NODE_TYPE,
    generate_edge_flow_id,
)
from planmap.domain.progress import clamp_progress

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    CLOSED = "closed"


class SaveStatus(str, Enum):
    SAVED = "saved"
    DIRTY = "dirty"
    SAVING = "saving"
    ERROR = "error"


class EditorClosedError(RuntimeError):
    pass


class EditorSession:
    """Everything the canvas needs for one open mindmap.

    Lifecycle is ``loading -> ready -> closed``. Save status moves
    ``saved -> dirty -> saving -> saved``; a failed save leaves it at
    ``error`` with the unsaved positions still queued.
    """

    def __init__(
        self,
        client: PlanmapClient,
        mindmap_id: str,
        viewport_store: LocalViewportStore | None = None,
        policy: AutosavePolicy | None = None,
        content_delay: float | None = None,
        viewport_poll: float | None = None,
        viewport_debounce: float | None = None,
    ) -> None:
        self.client = client
        self.mindmap_id = mindmap_id
        self.state = SessionState.LOADING
        self.save_status = SaveStatus.SAVED
        self.mindmap: Optional[Dict[str, Any]] = None
        self.viewport = Viewport()
        self.panel: Optional[NodeSidePanel] = None
        self.content_delay = (
            content_delay if content_delay is not None else settings.CONTENT_AUTOSAVE_DEBOUNCE_MS / 1000
        )
        # Dragged positions not confirmed by a save yet, keyed by node id
        self._drags: Dict[str, Position] = {}

        self.positions = PositionAutosave(policy or AutosavePolicy.from_settings(settings), self._save_positions)
        self.viewport_autosave = ViewportAutosave(
            viewport_store or LocalViewportStore(settings.LOCAL_STORAGE_DIR),
            mindmap_id,
            get_viewport=lambda: self.viewport,
            on_significant_change=self._viewport_moved,
            poll_interval=viewport_poll if viewport_poll is not None else settings.VIEWPORT_POLL_MS / 1000,
            debounce_delay=(
                viewport_debounce if viewport_debounce is not None else settings.VIEWPORT_DEBOUNCE_MS / 1000
            ),
        )

    async def load(self) -> None:
        """Fetch the mindmap, seed the node and edge caches, and restore the viewport."""
        self._require_open()
        detail = await self.client.mindmaps.get(self.mindmap_id)
        cache = self.client.cache
        cache.set(nodes_key(self.mindmap_id), detail.get("nodes", []))
        cache.set(edges_key(self.mindmap_id), detail.get("edges", []))
        self.mindmap = {k: v for k, v in detail.items() if k not in ("nodes", "edges")}

        self.viewport = self.viewport_autosave.restore()
        self.positions.start()
        self.viewport_autosave.start()
        self.state = SessionState.READY
        logger.debug(f"Editor ready for mindmap {self.mindmap_id}")

    @property
    def nodes(self) -> List[Dict[str, Any]]:
        return self.client.nodes.cached(self.mindmap_id)

    @property
    def edges(self) -> List[Dict[str, Any]]:
        return self.client.edges.cached(self.mindmap_id)

    @property
    def flow_nodes(self) -> List[FlowNode]:
        return to_flow_nodes(self.nodes, self._drags)

    @property
    def flow_edges(self) -> List[FlowEdge]:
        return to_flow_edges(self.edges)

    @property
    def is_dirty(self) -> bool:
        return self.positions.dirty

    def node_by_flow_id(self, react_flow_id: str) -> Dict[str, Any]:
        node = find_by(self.nodes, "react_flow_id", react_flow_id)
        if node is None:
            raise KeyError(f"Unknown node: {react_flow_id}")
        return node

    # Gestures
    def drag_end(self, react_flow_id: str, position: Position) -> None:
        self._require_ready()
        node = self.node_by_flow_id(react_flow_id)
        self._drags[node["id"]] = dict(position)
        self.positions.record(node["id"], position)
        self.save_status = SaveStatus.DIRTY

    def set_viewport(self, x: float, y: float, zoom: float) -> None:
        self.viewport = Viewport(x=x, y=y, zoom=zoom)

    async def connect(self, source: str, target: str, edge_type: str | None = None) -> Optional[Dict[str, Any]]:
        """Create an edge between two canvas node ids; None if the server refused it."""
        self._require_ready()
        data = {
            "mindmap_id": self.mindmap_id,
            "react_flow_id": generate_edge_flow_id(source, target),
            "source_node_id": source,
            "target_node_id": target,
        }
        if edge_type:
            data["type"] = edge_type
        return await self.client.edges.create.mutate(data)

    async def add_node_at(self, position: Position) -> Optional[Dict[str, Any]]:
        self._require_ready()
        return await self.client.nodes.create.mutate({
            "mindmap_id": self.mindmap_id,
            "react_flow_id": f"node-{uuid.uuid4().hex}",
            "title": DEFAULT_NODE_TITLE,
            "type": STUDY_NODE_TYPE,
            "content": "",
            "progress": 0,
            "position": dict(position),
        })

    def activate_node(self, react_flow_id: str) -> NodeSidePanel:
        """Open the side panel for a node, replacing any panel already open."""
        self._require_ready()
        node = self.node_by_flow_id(react_flow_id)
        if self.panel is not None:
            self.panel.close()
        self.panel = NodeSidePanel(self, node)
        return self.panel

    async def delete_node(self, node_id: str, confirm: Callable[[], bool] = lambda: True) -> bool:
        self._require_ready()
        if not confirm():
            return False
        if self.panel is not None and self.panel.node_id == node_id:
            self.panel.close()
        self._drags.pop(node_id, None)
        self.positions.pending.pop(node_id, None)
        return await self.client.nodes.delete.mutate(node_id) is not None

    # Saving
    async def save_now(self) -> bool:
        """Manual save; False if the save failed."""
        self._require_ready()
        try:
            await self.positions.flush()
        except ApiError:
            return False
        return True

    async def _save_positions(self, changes: Dict[str, Position]) -> None:
        self.save_status = SaveStatus.SAVING
        if changes:
            try:
                await self.client.nodes.bulk_update.mutate_async(
                    [{"id": node_id, "position": position} for node_id, position in changes.items()]
                )
            except ApiError:
                self.save_status = SaveStatus.ERROR
                raise
            for node_id, position in changes.items():
                if self._drags.get(node_id) == position:
                    del self._drags[node_id]
        if self.state is SessionState.CLOSED:
            return
        # Saving also pins the viewport, with or without position changes
        self.viewport_autosave.save_now()
        self.save_status = SaveStatus.DIRTY if self.positions.dirty else SaveStatus.SAVED

    def _viewport_moved(self) -> None:
        if self.state is not SessionState.READY:
            return
        self.positions.mark_dirty()
        self.save_status = SaveStatus.DIRTY

    def close(self) -> None:
        """Stop every timer; pending edits that were not flushed are dropped."""
        if self.panel is not None:
            self.panel.close()
        self.positions.close()
        self.viewport_autosave.close()
        self.state = SessionState.CLOSED

    def _require_open(self) -> None:
        if self.state is SessionState.CLOSED:
            raise EditorClosedError(f"Editor for mindmap {self.mindmap_id} is closed")

    def _require_ready(self) -> None:
        self._require_open()
        if self.state is not SessionState.READY:
            raise RuntimeError(f"Editor for mindmap {self.mindmap_id} is not loaded yet")


class NodeSidePanel:
    """Title, content and progress editing for one node, autosaved per field."""

    def __init__(self, session: EditorSession, node: Dict[str, Any]) -> None:
        self._session = session
        self.node_id = node["id"]
        self.title = node["title"]
        self.content = node.get("content") or ""
        self.progress = node.get("progress") or 0
        self.autosave = ContentAutosave(session.content_delay, self._save_field)
        self.closed = False

    def set_title(self, title: str) -> None:
        self.title = title
        self.autosave.edit("title", title.strip() or DEFAULT_NODE_TITLE)

    def set_content(self, content: str) -> None:
        self.content = content
        self.autosave.edit("content", content.strip())

    def set_progress(self, progress: Any) -> None:
        self.progress = clamp_progress(progress)
        self.autosave.edit("progress", self.progress)

    async def save(self) -> None:
        """Send every pending field now."""
        await self.autosave.flush_all()

    async def _save_field(self, field: str, value: Any) -> None:
        result = await self._session.client.nodes.update.mutate({"id": self.node_id, field: value})
        if result is None:
            logger.warning(f"Saving {field} for node {self.node_id} failed: {self._session.client.nodes.update.error!r}")

    async def delete(self, confirm: Callable[[], bool] = lambda: True) -> bool:
        return await self._session.delete_node(self.node_id, confirm)

    def close(self) -> None:
        self.autosave.close()
        self.closed = True
        if self._session.panel is self:
            self._session.panel = None
