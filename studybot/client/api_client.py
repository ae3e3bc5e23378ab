"""
Study Bot API Client - Thin async wrapper over the HTTP API.
"""

import logging
from typing import Any, Dict, List, Optional
import httpx

from ..models import ChatResponse, Message, SessionSummary

logger = logging.getLogger(__name__)


class StudyBotAPIError(Exception):
    """Raised when the API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StudyBotAPIClient:
    """
    One method per API route.

    Usage:
        async with StudyBotAPIClient("http://localhost:8000") as api:
            reply = await api.send_chat("1700000000000", "What is entropy?")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0,
    ):
        """
        Args:
            base_url: Server address
            api_prefix: Route prefix the server is mounted under (e.g. "/api")
            http_client: Preconfigured client; one is created if not given
            timeout: Request timeout in seconds for the created client
        """
        self.api_prefix = api_prefix.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "StudyBotAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api_prefix}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StudyBotAPIError(f"{method} {url} failed: {e}") from e

        if resp.is_error:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise StudyBotAPIError(
                f"Request failed with status code {resp.status_code}: {detail}",
                status_code=resp.status_code,
            )
        return resp.json()

    async def send_chat(self, session_id: str, message: str) -> ChatResponse:
        data = await self._request("POST", "/chat", json={"sessionId": session_id, "message": message})
        return ChatResponse.model_validate(data)

    async def get_history(self, session_id: str) -> List[Message]:
        data = await self._request("GET", f"/history/{session_id}")
        return [Message.model_validate(m) for m in data.get("messages", [])]

    async def list_sessions(self) -> List[SessionSummary]:
        data = await self._request("GET", "/sessions")
        return [SessionSummary.model_validate(s) for s in data.get("sessions", [])]

    async def rename_session(self, session_id: str, name: str) -> bool:
        data = await self._request("PUT", f"/sessions/{session_id}/rename", json={"name": name})
        return bool(data.get("success"))

    async def delete_session(self, session_id: str) -> bool:
        data = await self._request("DELETE", f"/sessions/{session_id}")
        return bool(data.get("success"))
