from __future__ import annotations

from planmap.client.edge_queries import EdgeQueries
from planmap.client.mindmap_queries import MindmapQueries
from planmap.client.node_queries import NodeQueries
from planmap.client.query_client import QueryClient


class PlanmapClient(QueryClient):
    """Query client with the mindmap, node and edge query families attached."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.mindmaps = MindmapQueries(self)
        self.nodes = NodeQueries(self)
        self.edges = EdgeQueries(self)
