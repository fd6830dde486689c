#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoints: live preview for the post/comment editor.

GET  /api/v1/render?content=...&highlight=true&tables=true&task_lists=true&linkify=true
POST /api/v1/render                 {"content": "...", "options": {...}}
GET  /api/v1/render/highlight.css
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Response

from richtext.core.config import get_settings
from richtext.schemas import RenderOptions, RenderRequest, RenderResponse
from richtext.services.highlighting import stylesheet
from richtext.services.renderer import render_cached


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

@router.get("")
async def render_preview(
    content:    str = Query(default="", max_length=1_000_000),
    highlight:  bool | None = Query(default=None),
    tables:     bool | None = Query(default=None),
    task_lists: bool | None = Query(default=None),
    linkify:    bool | None = Query(default=None),
    max_length: int | None = Query(default=None, ge=0),
):
    """Return rendered HTML for a snippet of markdown, used by the live editor preview."""
    settings = get_settings()
    _check_length(content)
    options = RenderOptions(
        enable_syntax_highlight=settings.default_syntax_highlight if highlight is None else highlight,
        enable_tables=settings.default_tables if tables is None else tables,
        enable_task_lists=settings.default_task_lists if task_lists is None else task_lists,
        enable_linkify=settings.default_linkify if linkify is None else linkify,
        max_length=max_length,
    )
    return {"html": render_cached(content, options)}


@router.post("", response_model=RenderResponse)
async def render_document(payload: RenderRequest):
    """Render a full post or comment body with explicit options."""
    _check_length(payload.content)
    max_length = payload.options.max_length
    truncated = bool(max_length) and len(payload.content) > max_length
    return RenderResponse(
        html=render_cached(payload.content, payload.options),
        truncated=truncated,
    )


@router.get("/highlight.css")
async def highlight_css():
    """Pygments stylesheet matching the ``.highlight`` code-block markup."""
    css = stylesheet(get_settings().pygments_style)
    return Response(content=css, media_type="text/css")


# -----------------------------------------------------------------------------

def _check_length(content: str) -> None:
    limit = get_settings().max_content_length
    if len(content) > limit:
        raise HTTPException(
            status_code=422,
            detail=f"Content exceeds {limit} characters",
        )


# -----------------------------------------------------------------------------
