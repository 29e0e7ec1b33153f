"""
HTTP client for the folder API, used by the client-side hooks and components.
"""
import aiohttp
import asyncio
import logging
from typing import Any, Dict, Optional

from app.config import settings
from app.schemas.response import ApiResponse

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)


class ApiError(Exception):
    """Raised when the API answers with an error envelope or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class ApiClient:
    def __init__(self, base_url: str = settings.API_BASE_URL, token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> ApiResponse:
        url = f"{self.base_url}{path}"
        try:
            async with aiohttp.ClientSession(headers=self._headers()) as session:
                async with session.request(method, url, json=json, timeout=REQUEST_TIMEOUT) as response:
                    payload = await response.json(content_type=None)
                    status = response.status
        except asyncio.TimeoutError as e:
            logger.error(f"Request {method} {url} timed out")
            raise ApiError("Request timed out") from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Request {method} {url} failed: {str(e)}")
            raise ApiError(f"Request failed: {str(e)}") from e

        if not isinstance(payload, dict):
            raise ApiError("Unexpected response from server", status)

        if "success" not in payload:
            # Auth endpoints answer with bare objects rather than an envelope
            payload = {"success": status < 400, "data": payload}

        result = ApiResponse.model_validate(payload)
        if status >= 400 or not result.success:
            message = result.error.message if result.error else f"Request failed with status {status}"
            code = result.error.code if result.error else None
            raise ApiError(message, status, code)
        return result

    async def get_folders(self) -> ApiResponse:
        return await self._request("GET", "/api/folders")

    async def get_folder(self, folder_id: str) -> ApiResponse:
        return await self._request("GET", f"/api/folders/{folder_id}")

    async def create_folder(self, folder_data: Dict[str, Any]) -> ApiResponse:
        return await self._request("POST", "/api/folders", json=folder_data)

    async def update_folder(self, folder_id: str, updates: Dict[str, Any]) -> ApiResponse:
        return await self._request("PUT", f"/api/folders/{folder_id}", json=updates)

    async def delete_folder(self, folder_id: str) -> ApiResponse:
        return await self._request("DELETE", f"/api/folders/{folder_id}")

    async def get_apps_in_folder(self, folder_id: str) -> ApiResponse:
        return await self._request("GET", f"/api/folders/{folder_id}/apps")

    async def move_app_to_folder(self, app_id: str, folder_id: Optional[str]) -> ApiResponse:
        return await self._request("POST", "/api/folders/move", json={"appId": app_id, "folderId": folder_id})

    async def check_auth(self) -> ApiResponse:
        return await self._request("GET", "/api/auth/check")
