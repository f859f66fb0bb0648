"""Thin async client for the Supabase Auth admin API.

Only the calls the admin user-management endpoints need: create a
confirmed user and delete one again when the follow-up profile write
fails.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 10.0


class SupabaseAdminError(Exception):
    """Supabase rejected an admin call; ``message`` is safe to show."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SupabaseAdminClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.SUPABASE_URL).rstrip("/")
        self.service_role_key = service_role_key or settings.SUPABASE_SERVICE_ROLE_KEY
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
        }
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            return await client.request(method, path, headers=self._headers(), json=json)

    async def create_user(
        self,
        email: str,
        password: str,
        user_metadata: Optional[dict] = None,
    ) -> dict:
        """Create an auth user with the email already confirmed."""
        response = await self._request(
            "POST",
            "/auth/v1/admin/users",
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": user_metadata or {},
            },
        )
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = (
                body.get("msg")
                or body.get("message")
                or body.get("error_description")
                or "Failed to create user"
            )
            logger.warning(
                "Supabase user creation failed (%s): %s", response.status_code, message
            )
            raise SupabaseAdminError(message, response.status_code)

        data = response.json()
        # Older GoTrue versions wrap the user object
        return data.get("user", data)

    async def delete_user(self, user_id: str) -> None:
        response = await self._request("DELETE", f"/auth/v1/admin/users/{user_id}")
        if response.status_code >= 400:
            logger.error(
                "Supabase user deletion failed for %s (%s): %s",
                user_id,
                response.status_code,
                response.text,
            )
            raise SupabaseAdminError("Failed to delete user", response.status_code)


def get_supabase_admin() -> SupabaseAdminClient:
    """FastAPI dependency; override in tests."""
    return SupabaseAdminClient()
