"""Default values shared by the API and the editor."""
import time

DEFAULT_MINDMAP_TITLE = "New mindmap"
DEFAULT_NODE_TITLE = "New node"
DEFAULT_NODE_TYPE = "default"
STUDY_NODE_TYPE = "studyNode"
DEFAULT_EDGE_TYPE = "default"
EDGE_TYPES = ("default", "straight", "step", "smoothstep")

DEFAULT_VIEWPORT = {"x": 0.0, "y": 0.0, "zoom": 1.0}
DEFAULT_NODE_POSITION = {"x": 100.0, "y": 100.0}


def generate_node_flow_id() -> str:
    return f"node-{int(time.time() * 1000)}"


def generate_edge_flow_id(source_node_id: str, target_node_id: str) -> str:
    return f"edge-{source_node_id}-{target_node_id}-{int(time.time() * 1000)}"
