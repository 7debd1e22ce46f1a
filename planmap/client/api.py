"""Async HTTP client for the PlanMap API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Failed API call; ``status`` is 0 when no response was received."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class PlanmapApi:
    """Thin wrapper over ``httpx.AsyncClient``; every method returns decoded JSON."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.token = token

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PlanmapApi:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(0, str(e)) from e
        if response.is_error:
            raise ApiError(response.status_code, self._error_message(response))
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, list):
            # FastAPI request validation errors
            return "; ".join(item.get("msg", str(item)) for item in detail)
        return str(detail or body)

    # Auth
    async def signup(self, email: str, password: str, username: str | None = None) -> Dict[str, Any]:
        result = await self._request("POST", "/api/auth/signup", json={
            "email": email, "password": password, "username": username,
        })
        self.token = result["access_token"]
        return result

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        result = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = result["access_token"]
        return result

    def logout(self) -> None:
        self.token = None

    async def get_profile(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/profile")

    async def update_profile(self, **fields) -> Dict[str, Any]:
        return await self._request("PUT", "/api/profile", json=fields)

    # Mindmaps
    async def list_mindmaps(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/mindmaps")

    async def create_mindmap(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/mindmaps", json=data)

    async def get_mindmap(self, mindmap_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/mindmaps/{mindmap_id}")

    async def update_mindmap(self, mindmap_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/mindmaps/{mindmap_id}", json=data)

    async def delete_mindmap(self, mindmap_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/mindmaps/{mindmap_id}")

    # Nodes
    async def list_nodes(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/nodes", params={"mindmap_id": mindmap_id})

    async def create_node(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/nodes", json=data)

    async def update_node(self, node_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/nodes/{node_id}", json=data)

    async def bulk_update_nodes(self, nodes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self._request("PUT", "/api/nodes/bulk", json={"nodes": nodes})

    async def delete_node(self, node_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/nodes/{node_id}")

    # Edges
    async def list_edges(self, mindmap_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/edges", params={"mindmap_id": mindmap_id})

    async def create_edge(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/edges", json=data)

    async def delete_edge(
        self,
        edge_id: Optional[str] = None,
        react_flow_id: Optional[str] = None,
        mindmap_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {"id": edge_id} if edge_id else {"react_flow_id": react_flow_id}
        if mindmap_id:
            params["mindmap_id"] = mindmap_id
        return await self._request("DELETE", "/api/edges", params=params)
