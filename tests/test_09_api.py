#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the HTTP preview endpoints."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
from httpx import AsyncClient

from richtext.core.config import get_settings


# -----------------------------------------------------------------------------

TABLE_MD = "| a | b |\n|---|---|\n| 1 | 2 |\n"


# =============================================================================
# GET /api/v1/render
# =============================================================================

@pytest.mark.asyncio
async def test_preview_renders_markdown(client: AsyncClient):
    resp = await client.get("/api/v1/render", params={"content": "**hi**"})
    assert resp.status_code == 200
    assert "<strong>hi</strong>" in resp.json()["html"]


@pytest.mark.asyncio
async def test_preview_empty_content(client: AsyncClient):
    resp = await client.get("/api/v1/render")
    assert resp.status_code == 200
    assert resp.json()["html"] == ""


@pytest.mark.asyncio
async def test_preview_tables_flag(client: AsyncClient):
    resp = await client.get("/api/v1/render", params={"content": TABLE_MD, "tables": "false"})
    assert "<table" not in resp.json()["html"]


@pytest.mark.asyncio
async def test_preview_linkify_flag(client: AsyncClient):
    content = "see https://example.com now"
    on = await client.get("/api/v1/render", params={"content": content})
    off = await client.get("/api/v1/render", params={"content": content, "linkify": "false"})
    assert '<a href="https://example.com"' in on.json()["html"]
    assert "<a" not in off.json()["html"]


@pytest.mark.asyncio
async def test_preview_sanitizes(client: AsyncClient):
    resp = await client.get("/api/v1/render", params={"content": "<script>alert(1)</script>"})
    assert "<script" not in resp.json()["html"]


@pytest.mark.asyncio
async def test_preview_rejects_negative_max_length(client: AsyncClient):
    resp = await client.get("/api/v1/render", params={"content": "x", "max_length": -1})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_preview_rejects_oversized_content(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "max_content_length", 10)
    resp = await client.get("/api/v1/render", params={"content": "x" * 11})
    assert resp.status_code == 422


# =============================================================================
# POST /api/v1/render
# =============================================================================

@pytest.mark.asyncio
async def test_post_renders_with_options(client: AsyncClient):
    resp = await client.post("/api/v1/render", json={
        "content": "- [x] done\n\n" + TABLE_MD,
        "options": {"enable_tables": False},
    })
    assert resp.status_code == 200
    body = resp.json()
    assert "<table" not in body["html"]
    assert "checkbox" in body["html"]
    assert body["truncated"] is False


@pytest.mark.asyncio
async def test_post_reports_truncation(client: AsyncClient):
    resp = await client.post("/api/v1/render", json={
        "content": "The quick brown fox",
        "options": {"max_length": 11},
    })
    body = resp.json()
    assert body["truncated"] is True
    assert "The quick..." in body["html"]


@pytest.mark.asyncio
async def test_post_sanitize_overrides(client: AsyncClient):
    resp = await client.post("/api/v1/render", json={
        "content": "![x](/x.png) **b**",
        "options": {"sanitize_overrides": {"forbidden_tags": ["img"]}},
    })
    html = resp.json()["html"]
    assert "<img" not in html
    assert "<strong>b</strong>" in html


@pytest.mark.asyncio
async def test_post_allowed_tags_cannot_add_script(client: AsyncClient):
    resp = await client.post("/api/v1/render", json={
        "content": "<script>alert(1)</script>",
        "options": {"allowed_tags": ["p", "script"]},
    })
    assert "<script" not in resp.json()["html"]


@pytest.mark.asyncio
async def test_post_defaults_when_options_missing(client: AsyncClient):
    resp = await client.post("/api/v1/render", json={"content": "[a](http://x.com)"})
    assert 'target="_blank"' in resp.json()["html"]


# =============================================================================
# Stylesheet, health, 404
# =============================================================================

@pytest.mark.asyncio
async def test_highlight_css(client: AsyncClient):
    resp = await client.get("/api/v1/render/highlight.css")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/css")
    assert ".highlight" in resp.text


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_unknown_path_is_json_404(client: AsyncClient):
    resp = await client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Not found"}


# =============================================================================
# Settings
# =============================================================================

def test_settings_fields_are_rendering_only():
    fields = set(type(get_settings()).model_fields)
    assert "environment" not in fields
    assert {"default_tables", "default_task_lists", "default_linkify"} <= fields


def test_settings_read_from_prefixed_env(monkeypatch):
    monkeypatch.setenv("RICHTEXT_DEFAULT_LINKIFY", "false")
    get_settings.cache_clear()
    try:
        assert get_settings().default_linkify is False
    finally:
        get_settings.cache_clear()


# -----------------------------------------------------------------------------
