"""Tests for the editor session against the in-process app."""
from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from planmap.client import AutosavePolicy, EditorSession, LocalViewportStore, PlanmapClient, SaveStatus, SessionState
from planmap.client.editor import EditorClosedError
from planmap.client.viewport import Viewport

DELAY = 0.05


@pytest_asyncio.fixture
async def graph(api):
    """A mindmap with three nodes and one edge a -> b."""
    mindmap = await api.create_mindmap({"title": "Biology"})
    nodes = {}
    for flow_id, progress in (("a", 0), ("b", 45), ("c", 90)):
        nodes[flow_id] = await api.create_node({
            "mindmap_id": mindmap["id"], "react_flow_id": flow_id, "title": flow_id.upper(), "progress": progress,
        })
    await api.create_edge({"mindmap_id": mindmap["id"], "react_flow_id": "e-ab", "source_node_id": "a", "target_node_id": "b"})
    return mindmap, nodes


@pytest.fixture
def store(tmp_path):
    return LocalViewportStore(tmp_path)


@pytest_asyncio.fixture
async def session(api, graph, store):
    mindmap, _ = graph
    editor = EditorSession(
        PlanmapClient(api), mindmap["id"],
        viewport_store=store,
        policy=AutosavePolicy(debounce_delay=DELAY),
        content_delay=DELAY,
        viewport_poll=10,
        viewport_debounce=DELAY,
    )
    await editor.load()
    yield editor
    editor.close()


async def settle(session):
    await asyncio.sleep(DELAY * 3)
    await session.positions.wait_idle()


class TestLoading:
    """Test the render model built on load."""

    @pytest.mark.asyncio
    async def test_ready_with_render_model(self, session, graph):
        mindmap, nodes = graph

        assert session.state is SessionState.READY
        assert session.save_status is SaveStatus.SAVED
        assert session.mindmap["title"] == "Biology"
        assert "nodes" not in session.mindmap

        flow_nodes = {node.id: node for node in session.flow_nodes}
        assert set(flow_nodes) == {"a", "b", "c"}
        assert flow_nodes["b"].data["node_id"] == nodes["b"]["id"]
        assert flow_nodes["b"].data["level"] == "medium"
        assert flow_nodes["c"].data["level"] == "high"
        assert [(e.id, e.source, e.target) for e in session.flow_edges] == [("e-ab", "a", "b")]

    @pytest.mark.asyncio
    async def test_restores_saved_viewport(self, api, graph, store):
        mindmap, _ = graph
        store.save(mindmap["id"], Viewport(10, 20, 1.5))
        editor = EditorSession(PlanmapClient(api), mindmap["id"], viewport_store=store, viewport_poll=10)

        await editor.load()

        assert editor.viewport == Viewport(10, 20, 1.5)
        editor.close()

    @pytest.mark.asyncio
    async def test_gestures_need_a_loaded_session(self, api, graph, store):
        mindmap, _ = graph
        editor = EditorSession(PlanmapClient(api), mindmap["id"], viewport_store=store)
        with pytest.raises(RuntimeError):
            editor.drag_end("a", {"x": 1, "y": 1})


class TestPositionSaving:
    """Drags are batched into one bulk update."""

    @pytest.mark.asyncio
    async def test_drags_saved_in_one_batch(self, session, graph, api):
        mindmap, nodes = graph
        session.set_viewport(5, 6, 0.8)

        session.drag_end("a", {"x": 100, "y": 100})
        session.drag_end("b", {"x": 200, "y": 50})
        session.drag_end("a", {"x": 120, "y": 90})
        assert session.save_status is SaveStatus.DIRTY
        assert {n.id: n.position for n in session.flow_nodes}["a"] == {"x": 120, "y": 90}

        await settle(session)

        assert session.save_status is SaveStatus.SAVED
        assert not session.is_dirty
        stored = {n["react_flow_id"]: n["position"] for n in await api.list_nodes(mindmap["id"])}
        assert stored["a"] == {"x": 120, "y": 90}
        assert stored["b"] == {"x": 200, "y": 50}
        assert session.viewport_autosave.last_saved == Viewport(5, 6, 0.8)

    @pytest.mark.asyncio
    async def test_manual_save_without_changes(self, session, store):
        session.set_viewport(1, 2, 1.1)

        assert await session.save_now() is True

        assert session.save_status is SaveStatus.SAVED
        assert store.load(session.mindmap_id) == Viewport(1, 2, 1.1)

    @pytest.mark.asyncio
    async def test_failed_save_keeps_changes_queued(self, session, graph, api):
        _, nodes = graph
        await api.delete_node(nodes["a"]["id"])

        session.drag_end("a", {"x": 9, "y": 9})
        assert await session.save_now() is False

        assert session.save_status is SaveStatus.ERROR
        assert session.is_dirty
        assert session.positions.pending == {nodes["a"]["id"]: {"x": 9, "y": 9}}

    @pytest.mark.asyncio
    async def test_significant_pan_marks_dirty(self, session):
        await session.save_now()
        session.set_viewport(300, 0, 1)

        await session.viewport_autosave.poll()

        assert session.save_status is SaveStatus.DIRTY


class TestEditing:
    """Connect, add, edit and delete."""

    @pytest.mark.asyncio
    async def test_connect(self, session, api):
        edge = await session.connect("b", "c")

        assert edge["react_flow_id"].startswith("edge-b-c-")
        assert ("b", "c") in [(e.source, e.target) for e in session.flow_edges]
        assert len(await api.list_edges(session.mindmap_id)) == 2

    @pytest.mark.asyncio
    async def test_connect_refused(self, session):
        assert await session.connect("a", "a") is None
        assert session.client.edges.create.error.status == 400
        assert len(session.flow_edges) == 1

    @pytest.mark.asyncio
    async def test_add_node_at(self, session):
        node = await session.add_node_at({"x": 30, "y": 40})

        assert node["title"] == "New node"
        assert node["type"] == "studyNode"
        assert node["react_flow_id"].startswith("node-")
        flow_node = session.flow_nodes[-1]
        assert flow_node.id == node["react_flow_id"]
        assert flow_node.position == {"x": 30, "y": 40}

    @pytest.mark.asyncio
    async def test_side_panel_saves_fields(self, session, graph, api):
        mindmap, nodes = graph
        panel = session.activate_node("a")

        panel.set_title("   ")
        panel.set_content("  Mitochondria  ")
        panel.set_progress(130)
        assert panel.progress == 100
        await panel.save()

        stored = {n["react_flow_id"]: n for n in await api.list_nodes(mindmap["id"])}["a"]
        assert stored["title"] == "New node"
        assert stored["content"] == "Mitochondria"
        assert stored["progress"] == 100

    @pytest.mark.asyncio
    async def test_activating_another_node_replaces_panel(self, session):
        first = session.activate_node("a")
        second = session.activate_node("b")

        assert first.closed
        assert session.panel is second

    @pytest.mark.asyncio
    async def test_delete_needs_confirmation(self, session, graph):
        _, nodes = graph

        assert await session.delete_node(nodes["a"]["id"], confirm=lambda: False) is False
        assert len(session.flow_nodes) == 3

        assert await session.delete_node(nodes["a"]["id"]) is True
        assert {n.id for n in session.flow_nodes} == {"b", "c"}
        assert session.flow_edges == []

    @pytest.mark.asyncio
    async def test_delete_from_panel_closes_it(self, session, graph):
        _, nodes = graph
        panel = session.activate_node("b")

        assert await panel.delete() is True

        assert panel.closed
        assert session.panel is None


class TestClosing:
    """A closed session refuses further work."""

    @pytest.mark.asyncio
    async def test_close(self, session):
        session.drag_end("a", {"x": 1, "y": 1})
        session.close()

        assert session.state is SessionState.CLOSED
        with pytest.raises(EditorClosedError):
            session.drag_end("a", {"x": 2, "y": 2})
        with pytest.raises(EditorClosedError):
            await session.save_now()
        with pytest.raises(EditorClosedError):
            await session.load()

    @pytest.mark.asyncio
    async def test_save_finishing_after_close_does_not_touch_viewport(self, api, graph, store, monkeypatch):
        mindmap, nodes = graph
        entered, release = asyncio.Event(), asyncio.Event()
        bulk_update_nodes = api.bulk_update_nodes

        async def gated_bulk_update(items):
            entered.set()
            await release.wait()
            return await bulk_update_nodes(items)

        monkeypatch.setattr(api, "bulk_update_nodes", gated_bulk_update)
        editor = EditorSession(
            PlanmapClient(api), mindmap["id"], viewport_store=store,
            policy=AutosavePolicy(debounce_delay=10), viewport_poll=10,
        )
        await editor.load()
        editor.drag_end("a", {"x": 70, "y": 80})
        editor.set_viewport(7, 8, 1.2)

        saving = asyncio.create_task(editor.save_now())
        await entered.wait()
        editor.close()
        release.set()

        assert await saving is True
        assert store.load(mindmap["id"]) is None
        assert editor.state is SessionState.CLOSED
        stored = {n["react_flow_id"]: n["position"] for n in await api.list_nodes(mindmap["id"])}
        assert stored["a"] == {"x": 70, "y": 80}
