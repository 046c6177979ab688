"""
Tests for the latex2image renderer client.

Run with: pytest service/tests/test_renderer.py -v
"""

import asyncio
import json
from typing import Any

import httpx
import pytest

from ltexbot.services.renderer import (
    RendererClient, get_renderer_client, close_renderer_client, render_all, wrap_formula
)

RENDER_URL = "https://render.test/latex2image"


def make_client(handler) -> RendererClient:
    return RendererClient(
        url=RENDER_URL,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_wrap_formula():
    assert wrap_formula("x^2") == "\\begin{align*}\nx^2\n\\end{align*}\n"


@pytest.mark.asyncio
async def test_render_posts_wrapped_formula() -> None:
    observed: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["method"] = request.method
        observed["url"] = str(request.url)
        observed["body"] = json.loads(request.content)
        return httpx.Response(200, json={"imageUrl": "https://img.test/1.jpg"})

    client = make_client(handler)
    try:
        result = await client.render("x^2")
    finally:
        await client.close()

    assert result == "https://img.test/1.jpg"
    assert observed["method"] == "POST"
    assert observed["url"] == RENDER_URL
    assert observed["body"] == {
        "latexInput": "\\begin{align*}\nx^2\n\\end{align*}\n",
        "outputFormat": "JPG",
        "outputScale": "1000%",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [500, 502, 503, 504])
async def test_server_error_returns_none(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"imageUrl": "https://img.test/ignored.jpg"})

    client = make_client(handler)
    try:
        assert await client.render(r"\frac{") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_client_error_without_image_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "bad request"})

    client = make_client(handler)
    try:
        assert await client.render("x") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_non_json_body_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    client = make_client(handler)
    try:
        assert await client.render("x") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_transport_error_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    try:
        assert await client.render("x") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_empty_formula_is_rejected() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"imageUrl": "x"})

    client = make_client(handler)
    try:
        with pytest.raises(ValueError):
            await client.render("")
    finally:
        await client.close()
    assert calls == []


@pytest.mark.asyncio
async def test_no_caching() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"imageUrl": "https://img.test/a.jpg"})

    client = make_client(handler)
    try:
        await client.render("a")
        await client.render("a")
    finally:
        await client.close()
    assert len(calls) == 2


class SlowRenderer:
    """Earlier formulas take longer, so requests finish in reverse order."""

    def __init__(self):
        self.finished = []

    async def render(self, formula):
        await asyncio.sleep(0.01 * (5 - int(formula)))
        self.finished.append(formula)
        return None if formula == "2" else f"url-{formula}"


@pytest.mark.asyncio
async def test_render_all_preserves_input_order() -> None:
    renderer = SlowRenderer()
    result = await render_all(renderer, ["0", "1", "2", "3"])

    assert renderer.finished == ["3", "2", "1", "0"]
    assert result == [("0", "url-0"), ("1", "url-1"), ("2", None), ("3", "url-3")]


class ExplodingRenderer:
    """Fails at once on "boom"; other formulas wait until cancelled."""

    def __init__(self):
        self.cancelled = []

    async def render(self, formula):
        if formula == "boom":
            raise RuntimeError("renderer bug")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled.append(formula)
            raise
        return f"url-{formula}"


@pytest.mark.asyncio
async def test_render_all_cancels_batch_on_error() -> None:
    renderer = ExplodingRenderer()
    with pytest.raises(RuntimeError):
        await render_all(renderer, ["a", "boom", "b"])

    await asyncio.sleep(0.01)
    assert sorted(renderer.cancelled) == ["a", "b"]


@pytest.mark.asyncio
async def test_render_all_empty() -> None:
    assert await render_all(SlowRenderer(), []) == []


@pytest.mark.asyncio
async def test_singleton_uses_settings(monkeypatch) -> None:
    monkeypatch.setenv("RENDERER_URL", RENDER_URL)
    monkeypatch.setenv("RENDERER_OUTPUT_SCALE", "500%")
    from ltexbot.config import get_settings
    get_settings.cache_clear()

    client = get_renderer_client()
    try:
        assert client is get_renderer_client()
        assert client.url == RENDER_URL
        assert client.output_scale == "500%"
    finally:
        await close_renderer_client()
