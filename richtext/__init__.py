"""Markdown to safe HTML rendering for user-authored posts and comments."""
from __future__ import annotations

from richtext._version import __version__
from richtext.schemas import RenderOptions, SanitizeOverrides
from richtext.services.renderer import render, render_cached

__all__ = ["__version__", "RenderOptions", "SanitizeOverrides", "render", "render_cached"]
