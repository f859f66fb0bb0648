"""Unit tests for the Supabase admin client, served by httpx.MockTransport."""

import json

import httpx
import pytest
from libs.common.supabase_admin import SupabaseAdminClient, SupabaseAdminError


def _client(handler) -> SupabaseAdminClient:
    return SupabaseAdminClient(
        base_url="https://project.supabase.co/",
        service_role_key="service-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_posts_confirmed_user():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"id": "7f1c1b7e-0c1d-4b8a-9a57-0a3f4f4c2b11", "email": "a@example.com"},
        )

    user = await _client(handler).create_user(
        "a@example.com", "secret123", user_metadata={"role": "admin"}
    )

    assert user["id"] == "7f1c1b7e-0c1d-4b8a-9a57-0a3f4f4c2b11"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://project.supabase.co/auth/v1/admin/users"
    assert seen["headers"]["apikey"] == "service-key"
    assert seen["headers"]["authorization"] == "Bearer service-key"
    assert seen["body"]["email_confirm"] is True
    assert seen["body"]["user_metadata"] == {"role": "admin"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_unwraps_user_envelope():
    def handler(request):
        return httpx.Response(200, json={"user": {"id": "abc", "email": "b@example.com"}})

    user = await _client(handler).create_user("b@example.com", "secret123")

    assert user == {"id": "abc", "email": "b@example.com"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_error_carries_message():
    def handler(request):
        return httpx.Response(422, json={"msg": "A user with this email already exists"})

    with pytest.raises(SupabaseAdminError) as exc_info:
        await _client(handler).create_user("dup@example.com", "secret123")

    assert exc_info.value.message == "A user with this email already exists"
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_error_without_json_body():
    def handler(request):
        return httpx.Response(500, text="upstream exploded")

    with pytest.raises(SupabaseAdminError) as exc_info:
        await _client(handler).create_user("c@example.com", "secret123")

    assert exc_info.value.message == "Failed to create user"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_user():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={})

    await _client(handler).delete_user("abc")

    assert calls == [("DELETE", "/auth/v1/admin/users/abc")]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_user_failure_raises():
    def handler(request):
        return httpx.Response(404, json={"msg": "User not found"})

    with pytest.raises(SupabaseAdminError):
        await _client(handler).delete_user("missing")
