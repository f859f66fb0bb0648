"""Unit tests for the global exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from libs.common.error_handler import GENERIC_ERROR_MESSAGE, add_exception_handlers
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError


class _Payload(BaseModel):
    quantity: int


def _app() -> FastAPI:
    app = FastAPI()
    add_exception_handlers(app)

    @app.get("/db")
    async def db_failure():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    @app.get("/boom")
    async def unexpected():
        raise RuntimeError("secret internals")

    @app.post("/echo")
    async def echo(payload: _Payload):
        return payload

    return app


async def _get(path: str, **kwargs):
    async with AsyncClient(
        transport=ASGITransport(app=_app(), raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        if kwargs:
            return await client.post(path, **kwargs)
        return await client.get(path)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_database_errors_are_opaque():
    response = await _get("/db")

    assert response.status_code == 500
    assert response.json() == {"detail": GENERIC_ERROR_MESSAGE}
    assert "connection refused" not in response.text


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unhandled_errors_are_opaque():
    response = await _get("/boom")

    assert response.status_code == 500
    assert "secret internals" not in response.text


@pytest.mark.asyncio
@pytest.mark.unit
async def test_validation_errors_are_400():
    response = await _get("/echo", json={"quantity": "many"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request"
    assert body["errors"][0]["loc"] == ["body", "quantity"]
