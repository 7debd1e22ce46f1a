"""Client sync layer: HTTP client, query cache, autosave and the editor session."""
from planmap.client.api import ApiError, PlanmapApi
from planmap.client.autosave import AutosavePolicy
from planmap.client.cache import QueryCache
from planmap.client.editor import EditorSession, NodeSidePanel, SaveStatus, SessionState
from planmap.client.planmap_client import PlanmapClient
from planmap.client.viewport import LocalViewportStore, Viewport

__all__ = [
    "ApiError",
    "AutosavePolicy",
    "EditorSession",
    "LocalViewportStore",
    "NodeSidePanel",
    "PlanmapApi",
    "PlanmapClient",
    "QueryCache",
    "SaveStatus",
    "SessionState",
    "Viewport",
]
