#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Code highlighting
=================
Wraps Pygments for fenced code blocks.

``highlight_code`` never raises: a declared language Pygments does not know
falls back to lexer guessing, and if guessing fails too the code comes back
HTML-escaped and labelled ``text``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
from typing import NamedTuple

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound


log = logging.getLogger(__name__)

PLAIN_LANGUAGE = "text"
CSS_CLASS = "highlight"


# -----------------------------------------------------------------------------

class HighlightResult(NamedTuple):
    html: str
    language_used: str


# -----------------------------------------------------------------------------

def _formatter() -> HtmlFormatter:
    # Body only; the code-block renderer supplies <pre><code>.
    return HtmlFormatter(nowrap=True, cssclass=CSS_CLASS)


def _highlight_declared(code: str, language: str) -> HighlightResult | None:
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        log.debug("No lexer for declared language %r, guessing instead", language)
        return None
    try:
        return HighlightResult(highlight(code, lexer, _formatter()), language)
    except Exception:
        log.warning("Highlighting failed for language %r", language, exc_info=True)
        return None


def _highlight_guessed(code: str) -> HighlightResult | None:
    try:
        lexer = guess_lexer(code)
        body = highlight(code, lexer, _formatter())
    except Exception:
        log.debug("Lexer guessing failed", exc_info=True)
        return None
    language = lexer.aliases[0] if lexer.aliases else PLAIN_LANGUAGE
    return HighlightResult(body, language)


# -----------------------------------------------------------------------------

def highlight_code(code: str, declared_language: str | None = None) -> HighlightResult:
    """
    Highlight *code*, trying *declared_language* first.

    Returns the highlighted markup (token ``<span>`` elements, no wrapper) and
    the language that was actually used.
    """
    language = (declared_language or "").strip().lower()
    result = None
    if language:
        result = _highlight_declared(code, language)
    if result is None:
        result = _highlight_guessed(code)
    if result is None:
        result = HighlightResult(_html.escape(code), PLAIN_LANGUAGE)
    return result


def stylesheet(style: str = "friendly") -> str:
    """Return the CSS rules for highlighted code under ``.highlight``."""
    return HtmlFormatter(style=style).get_style_defs(f".{CSS_CLASS}")


# -----------------------------------------------------------------------------
