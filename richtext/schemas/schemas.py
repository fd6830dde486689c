#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for render options and the HTTP request/response bodies.

``RenderOptions`` and ``SanitizeOverrides`` are frozen: one value describes one
render call completely and can be shared between concurrent calls or used as a
cache key.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render options
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

DEFAULT_ALLOWED_TAGS: frozenset[str] = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "br", "strong", "em", "u", "s", "del",
    "a", "img", "video", "audio",
    "ul", "ol", "li",
    "blockquote", "code", "pre",
    "table", "thead", "tbody", "tr", "th", "td",
    "div", "span",
    "hr", "input",
})


def _lower_names(v: frozenset[str] | None) -> frozenset[str] | None:
    if v is None:
        return None
    return frozenset(name.strip().lower() for name in v if name.strip())


# -----------------------------------------------------------------------------

class SanitizeOverrides(BaseModel):
    """Caller adjustments to the sanitize policy.  They can only narrow it:
    allow-sets are intersected with the defaults, forbidden tags are added."""

    model_config = ConfigDict(frozen=True)

    allowed_tags:       frozenset[str] | None = None
    allowed_attributes: frozenset[str] | None = None
    allowed_protocols:  frozenset[str] | None = None
    forbidden_tags:     frozenset[str] = frozenset()

    @field_validator("allowed_tags", "allowed_attributes", "allowed_protocols", "forbidden_tags")
    @classmethod
    def normalise_names(cls, v):
        return _lower_names(v)


# -----------------------------------------------------------------------------

class RenderOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    enable_syntax_highlight: bool = True
    allowed_tags:            frozenset[str] = DEFAULT_ALLOWED_TAGS
    max_length:              int | None = Field(default=None, ge=0)
    enable_tables:           bool = True
    enable_task_lists:       bool = True
    enable_linkify:          bool = True
    sanitize_overrides:      SanitizeOverrides | None = None

    @field_validator("allowed_tags")
    @classmethod
    def normalise_tags(cls, v):
        return _lower_names(v)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP bodies
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    content: str = ""
    options: RenderOptions = Field(default_factory=RenderOptions)


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    html: str
    truncated: bool = False
