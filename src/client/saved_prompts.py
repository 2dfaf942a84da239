"""Async HTTP client for the saved prompts API."""

from typing import Any, Dict, List, Optional

import httpx

from src.observability.logging import get_logger

logger = get_logger(__name__)


class SavedPromptsClientError(Exception):
    """Raised when the saved prompts API returns an error or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None, error: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.error = error or {}
        super().__init__(message)

    @property
    def code(self) -> Optional[str]:
        """Error code from the server's error body, if any."""
        return self.error.get("code")


class SavedPromptsClient:
    """
    Client for /api/v1/saved_prompts.

    Usage:
        async with SavedPromptsClient("http://localhost:8000", token="...") as api:
            created = await api.create({"name": "Greeting", "content": "Hello!"})
            prompts = await api.get()
            await api.update(created["id"], {"content": "Hi!"})
            await api.delete(created["id"])
    """

    PATH = "/api/v1/saved_prompts"

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SavedPromptsClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def url(self) -> str:
        return self.PATH

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        client = self._get_client()
        try:
            response = await client.request(method, path, json=json)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            error = _error_body(e.response)
            logger.warning(f"Saved prompts API error: {e.response.status_code} {error.get('code')}")
            raise SavedPromptsClientError(
                error.get("message") or f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                error=error,
            )
        except httpx.RequestError as e:
            logger.error(f"Saved prompts request failed: {str(e)}")
            raise SavedPromptsClientError(f"Request failed: {str(e)}")

    async def get(self) -> List[Dict[str, Any]]:
        """List the caller's saved prompts."""
        response = await self._request("GET", self.url)
        return response.json()["items"]

    async def show(self, prompt_id: str) -> Dict[str, Any]:
        """Get one saved prompt."""
        response = await self._request("GET", f"{self.url}/{prompt_id}")
        return response.json()

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a saved prompt."""
        response = await self._request("POST", self.url, json=data)
        return response.json()

    async def update(self, prompt_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Partially update a saved prompt."""
        response = await self._request("PATCH", f"{self.url}/{prompt_id}", json=data)
        return response.json()

    async def delete(self, prompt_id: str) -> None:
        """Delete a saved prompt."""
        await self._request("DELETE", f"{self.url}/{prompt_id}")


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    """Pull the {"detail": {"error": {...}}} payload out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return {}
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, dict) and isinstance(detail.get("error"), dict):
        return detail["error"]
    return {}
