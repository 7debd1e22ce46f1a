"""
Tests for FastAPI endpoints.
"""
import pytest


class TestHealthEndpoints:
    """Test liveness endpoints."""

    def test_health_reports_database(self, client):
        """Test health check runs a query against the database."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "version" in data

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "PlanMap" in response.json()["message"]


class TestAuthEndpoints:
    """Test signup, login and profile endpoints."""

    def test_signup_returns_token_and_creates_profile(self, client):
        """Test signup creates the identity and its profile."""
        response = client.post("/api/auth/signup", json={
            "email": "Ada@Example.com", "password": "secret123", "username": "ada",
        })
        assert response.status_code == 201

        data = response.json()
        assert data["token_type"] == "bearer"
        headers = {"Authorization": f"Bearer {data['access_token']}"}

        profile = client.get("/api/profile", headers=headers)
        assert profile.status_code == 200
        assert profile.json()["id"] == data["user_id"]
        assert profile.json()["username"] == "ada"

    def test_signup_duplicate_email(self, client, signup):
        """Test a second signup with the same e-mail is a conflict."""
        signup(email="dup@example.com")
        response = client.post("/api/auth/signup", json={"email": "DUP@example.com", "password": "secret123"})
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_signup_invalid_email(self, client):
        response = client.post("/api/auth/signup", json={"email": "not-an-email", "password": "secret123"})
        assert response.status_code == 400

    def test_signup_short_password(self, client):
        """Test request body validation answers 422."""
        response = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "123"})
        assert response.status_code == 422

    def test_login(self, client, signup):
        signup(email="login@example.com", password="secret123")

        response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_login_wrong_password(self, client, signup):
        signup(email="login@example.com", password="secret123")

        response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrong-one"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid e-mail or password"

    def test_update_profile(self, client, auth_headers):
        response = client.put("/api/profile", json={"username": "new-name"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "new-name"

    def test_update_profile_rejects_unknown_fields(self, client, auth_headers):
        response = client.put("/api/profile", json={"email": "x@example.com"}, headers=auth_headers)
        assert response.status_code == 422


class TestUnauthorizedRequests:
    """Requests without a valid session get 401 and no data."""

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/mindmaps"),
        ("post", "/api/mindmaps"),
        ("get", "/api/mindmaps/some-id"),
        ("get", "/api/nodes?mindmap_id=some-id"),
        ("put", "/api/nodes/bulk"),
        ("get", "/api/edges?mindmap_id=some-id"),
        ("delete", "/api/edges?id=some-id"),
        ("get", "/api/profile"),
    ])
    def test_missing_token(self, client, method, path):
        kwargs = {"json": {}} if method in ("post", "put") else {}
        response = getattr(client, method)(path, **kwargs)
        assert response.status_code == 401
        assert set(response.json()) == {"detail"}

    def test_malformed_token(self, client):
        response = client.get("/api/mindmaps", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_wrong_scheme(self, client, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        response = client.get("/api/mindmaps", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 401


class TestMindmapEndpoints:
    """Test mindmap-related API endpoints."""

    def test_create_mindmap_defaults(self, client, auth_headers):
        """Test a mindmap created without a body gets the default title."""
        response = client.post("/api/mindmaps", json={}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["title"] == "New mindmap"

    def test_list_only_own_mindmaps(self, client, auth_headers, other_headers, mindmap):
        client.post("/api/mindmaps", json={"title": "Someone else's"}, headers=other_headers)

        response = client.get("/api/mindmaps", headers=auth_headers)
        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [mindmap["id"]]

    def test_get_mindmap_with_graph(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        make_node("b")
        client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "b",
        }, headers=auth_headers)

        response = client.get(f"/api/mindmaps/{mindmap['id']}", headers=auth_headers)
        assert response.status_code == 200

        data = response.json()
        assert [n["react_flow_id"] for n in data["nodes"]] == ["a", "b"]
        assert len(data["edges"]) == 1

    def test_get_foreign_mindmap_is_not_found(self, client, other_headers, mindmap):
        response = client.get(f"/api/mindmaps/{mindmap['id']}", headers=other_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Mindmap not found"

    def test_update_mindmap_partial(self, client, auth_headers, mindmap):
        """Test only fields present in the body are written."""
        response = client.put(f"/api/mindmaps/{mindmap['id']}", json={
            "viewport": {"x": 10, "y": 20, "zoom": 1.5},
        }, headers=auth_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["title"] == "Biology"
        assert data["viewport"] == {"x": 10, "y": 20, "zoom": 1.5}

    def test_update_mindmap_rejects_unknown_fields(self, client, auth_headers, mindmap):
        response = client.put(f"/api/mindmaps/{mindmap['id']}", json={"owner": "me"}, headers=auth_headers)
        assert response.status_code == 422

    def test_update_mindmap_empty_title(self, client, auth_headers, mindmap):
        response = client.put(f"/api/mindmaps/{mindmap['id']}", json={"title": "   "}, headers=auth_headers)
        assert response.status_code == 400

    def test_delete_mindmap_cascades(self, client, auth_headers, mindmap, make_node):
        """Test deleting a mindmap removes its nodes and edges."""
        make_node("a")
        make_node("b")
        client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "b",
        }, headers=auth_headers)

        response = client.delete(f"/api/mindmaps/{mindmap['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get(f"/api/mindmaps/{mindmap['id']}", headers=auth_headers).status_code == 404
        assert client.get(f"/api/nodes?mindmap_id={mindmap['id']}", headers=auth_headers).status_code == 404

        from planmap.db.database import SessionLocal
        from planmap.db.models import Edge, Node
        session = SessionLocal()
        try:
            assert session.query(Node).count() == 0
            assert session.query(Edge).count() == 0
        finally:
            session.close()


class TestNodeEndpoints:
    """Test node-related API endpoints."""

    def test_create_node_defaults(self, client, auth_headers, mindmap):
        response = client.post("/api/nodes", json={"mindmap_id": mindmap["id"]}, headers=auth_headers)
        assert response.status_code == 201

        node = response.json()
        assert node["title"] == "New node"
        assert node["type"] == "default"
        assert node["progress"] == 0
        assert node["position"] == {"x": 0, "y": 0}
        assert node["react_flow_id"].startswith("node-")

    @pytest.mark.parametrize("given,stored", [(-5, 0), (150, 100), (42.6, 43), (42.5, 43)])
    def test_create_node_clamps_progress(self, make_node, given, stored):
        assert make_node("n", progress=given)["progress"] == stored

    def test_create_node_duplicate_flow_id(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        response = client.post("/api/nodes", json={"mindmap_id": mindmap["id"], "react_flow_id": "a"},
                               headers=auth_headers)
        assert response.status_code == 409

    def test_create_node_in_foreign_mindmap(self, client, other_headers, mindmap):
        response = client.post("/api/nodes", json={"mindmap_id": mindmap["id"]}, headers=other_headers)
        assert response.status_code == 404

    def test_list_nodes_requires_mindmap_id(self, client, auth_headers):
        response = client.get("/api/nodes", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "mindmap_id is required"

    def test_list_nodes_in_creation_order(self, client, auth_headers, mindmap, make_node):
        for flow_id in ("first", "second", "third"):
            make_node(flow_id)
        response = client.get(f"/api/nodes?mindmap_id={mindmap['id']}", headers=auth_headers)
        assert [n["react_flow_id"] for n in response.json()] == ["first", "second", "third"]

    def test_update_node(self, client, auth_headers, make_node):
        node = make_node("a", content="notes")
        response = client.put(f"/api/nodes/{node['id']}", json={"title": "  Cells  ", "progress": 101},
                              headers=auth_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["title"] == "Cells"
        assert data["progress"] == 100
        assert data["content"] == "notes"

    def test_update_node_empty_body(self, client, auth_headers, make_node):
        node = make_node("a")
        response = client.put(f"/api/nodes/{node['id']}", json={}, headers=auth_headers)
        assert response.status_code == 400

    def test_update_node_null_title(self, client, auth_headers, make_node):
        node = make_node("a")
        response = client.put(f"/api/nodes/{node['id']}", json={"title": None}, headers=auth_headers)
        assert response.status_code == 400

    def test_update_node_unknown_field(self, client, auth_headers, make_node):
        node = make_node("a")
        response = client.put(f"/api/nodes/{node['id']}", json={"mindmap_id": "elsewhere"}, headers=auth_headers)
        assert response.status_code == 422

    def test_update_missing_node(self, client, auth_headers):
        response = client.put("/api/nodes/missing", json={"title": "x"}, headers=auth_headers)
        assert response.status_code == 404

    def test_update_foreign_node_is_forbidden(self, client, other_headers, make_node):
        node = make_node("a")
        response = client.put(f"/api/nodes/{node['id']}", json={"title": "x"}, headers=other_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Unauthorized"

    def test_delete_node_removes_touching_edges(self, client, auth_headers, mindmap, make_node):
        a, b, c = make_node("a"), make_node("b"), make_node("c")
        for source, target in (("a", "b"), ("b", "c"), ("a", "c")):
            client.post("/api/edges", json={
                "mindmap_id": mindmap["id"], "source_node_id": source, "target_node_id": target,
            }, headers=auth_headers)

        response = client.delete(f"/api/nodes/{b['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        edges = client.get(f"/api/edges?mindmap_id={mindmap['id']}", headers=auth_headers).json()
        assert [(e["source_node_id"], e["target_node_id"]) for e in edges] == [("a", "c")]


class TestBulkNodeEndpoint:
    """Test the batched update used by position autosave."""

    def test_bulk_update_positions(self, client, auth_headers, make_node):
        a, b = make_node("a"), make_node("b")
        response = client.put("/api/nodes/bulk", json={"nodes": [
            {"id": a["id"], "position": {"x": 10, "y": 20}},
            {"id": b["id"], "position": {"x": 30, "y": 40}, "progress": 55.5},
        ]}, headers=auth_headers)
        assert response.status_code == 200

        data = {n["id"]: n for n in response.json()}
        assert data[a["id"]]["position"] == {"x": 10, "y": 20}
        assert data[b["id"]]["position"] == {"x": 30, "y": 40}
        assert data[b["id"]]["progress"] == 56

    def test_bulk_update_empty(self, client, auth_headers):
        response = client.put("/api/nodes/bulk", json={"nodes": []}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_bulk_update_repeated_id_last_wins(self, client, auth_headers, make_node):
        a = make_node("a")
        response = client.put("/api/nodes/bulk", json={"nodes": [
            {"id": a["id"], "position": {"x": 1, "y": 1}},
            {"id": a["id"], "position": {"x": 2, "y": 2}},
        ]}, headers=auth_headers)
        assert response.status_code == 200
        assert [n["position"] for n in response.json()] == [{"x": 2, "y": 2}]

    def test_bulk_update_is_atomic(self, client, auth_headers, mindmap, make_node):
        """Test one missing id leaves every node untouched."""
        a = make_node("a", position={"x": 5, "y": 5})
        response = client.put("/api/nodes/bulk", json={"nodes": [
            {"id": a["id"], "position": {"x": 99, "y": 99}},
            {"id": "missing", "position": {"x": 0, "y": 0}},
        ]}, headers=auth_headers)
        assert response.status_code == 404

        nodes = client.get(f"/api/nodes?mindmap_id={mindmap['id']}", headers=auth_headers).json()
        assert nodes[0]["position"] == {"x": 5, "y": 5}

    def test_bulk_update_foreign_node(self, client, other_headers, make_node):
        a = make_node("a")
        response = client.put("/api/nodes/bulk", json={"nodes": [{"id": a["id"], "title": "mine now"}]},
                              headers=other_headers)
        assert response.status_code == 403


class TestEdgeEndpoints:
    """Test edge-related API endpoints."""

    def test_create_edge(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        make_node("b")
        response = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "b", "type": "smoothstep",
        }, headers=auth_headers)
        assert response.status_code == 201

        edge = response.json()
        assert edge["type"] == "smoothstep"
        assert edge["react_flow_id"].startswith("edge-a-b-")

    def test_create_edge_missing_fields(self, client, auth_headers, mindmap):
        response = client.post("/api/edges", json={"mindmap_id": mindmap["id"]}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "mindmap_id, source_node_id, and target_node_id are required"

    def test_create_edge_unknown_endpoint(self, client, auth_headers, mindmap, make_node):
        """Test an endpoint that is not a node of the mindmap is rejected."""
        make_node("a")
        response = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "ghost",
        }, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Source or target node not found in this mindmap"

    def test_create_edge_self_loop(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        response = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "a",
        }, headers=auth_headers)
        assert response.status_code == 400

    def test_create_edge_unknown_type(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        make_node("b")
        response = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "b", "type": "zigzag",
        }, headers=auth_headers)
        assert response.status_code == 400

    def test_delete_edge_by_flow_id(self, client, auth_headers, mindmap, make_node):
        make_node("a")
        make_node("b")
        client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "react_flow_id": "e1", "source_node_id": "a", "target_node_id": "b",
        }, headers=auth_headers)

        response = client.delete("/api/edges?react_flow_id=e1", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/api/edges?mindmap_id={mindmap['id']}", headers=auth_headers).json() == []

    def test_delete_edge_without_identifier(self, client, auth_headers):
        response = client.delete("/api/edges", headers=auth_headers)
        assert response.status_code == 400

    def test_delete_foreign_edge(self, client, auth_headers, other_headers, mindmap, make_node):
        make_node("a")
        make_node("b")
        edge = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "source_node_id": "a", "target_node_id": "b",
        }, headers=auth_headers).json()

        response = client.delete(f"/api/edges?id={edge['id']}", headers=other_headers)
        assert response.status_code == 403

    @staticmethod
    def _graph_with_edge(client, headers, title="Graph", edge_flow_id="e1"):
        mindmap = client.post("/api/mindmaps", json={"title": title}, headers=headers).json()
        for flow_id in ("a", "b"):
            client.post("/api/nodes", json={"mindmap_id": mindmap["id"], "react_flow_id": flow_id}, headers=headers)
        response = client.post("/api/edges", json={
            "mindmap_id": mindmap["id"], "react_flow_id": edge_flow_id, "source_node_id": "a", "target_node_id": "b",
        }, headers=headers)
        assert response.status_code == 201, response.text
        return mindmap

    def test_delete_by_flow_id_ignores_other_users_edges(self, client, auth_headers, other_headers):
        theirs = self._graph_with_edge(client, other_headers)
        mine = self._graph_with_edge(client, auth_headers)

        response = client.delete("/api/edges?react_flow_id=e1", headers=auth_headers)

        assert response.status_code == 200
        assert client.get(f"/api/edges?mindmap_id={mine['id']}", headers=auth_headers).json() == []
        assert len(client.get(f"/api/edges?mindmap_id={theirs['id']}", headers=other_headers).json()) == 1

    def test_delete_other_users_edge_by_flow_id(self, client, auth_headers, other_headers):
        theirs = self._graph_with_edge(client, other_headers, edge_flow_id="theirs-only")

        response = client.delete("/api/edges?react_flow_id=theirs-only", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Edge not found"}
        assert len(client.get(f"/api/edges?mindmap_id={theirs['id']}", headers=other_headers).json()) == 1

    def test_delete_by_flow_id_within_mindmap(self, client, auth_headers):
        first = self._graph_with_edge(client, auth_headers, title="First")
        second = self._graph_with_edge(client, auth_headers, title="Second")

        response = client.delete(f"/api/edges?react_flow_id=e1&mindmap_id={second['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert client.get(f"/api/edges?mindmap_id={second['id']}", headers=auth_headers).json() == []
        assert len(client.get(f"/api/edges?mindmap_id={first['id']}", headers=auth_headers).json()) == 1
