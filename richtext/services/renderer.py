#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Markdown renderer
=================
Renders user-authored post and comment bodies to safe HTML.

Pipeline (one synchronous call, nothing shared between calls):

    truncate → parse (mistune AST) → render (dispatch table) → sanitize (bleach)

Every stage after truncation runs under a single error handler.  If parsing,
rendering or sanitizing raises, the call returns the source text
HTML-escaped with ``<br/>`` line breaks instead; it never returns partial
HTML and never raises.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Mapping, Union

import mistune
from mistune.core import BlockState
from mistune.inline_parser import InlineParser

from richtext.core.config import get_settings
from richtext.schemas import RenderOptions
from richtext.services.extensions import TASK_LIST_ITEM, Extension, extensions_for
from richtext.services.highlighting import highlight_code
from richtext.services.sanitizer import policy_for, sanitize
from richtext.services.truncation import truncate


log = logging.getLogger(__name__)

Handler = Callable[..., str]

_STRIP_TAGS_RE = re.compile(r"<[^>]+>")


# -----------------------------------------------------------------------------
# Tokenizer
# -----------------------------------------------------------------------------

def parse(text: str, extensions: tuple[Extension, ...]) -> list[dict]:
    """Tokenize *text* into a mistune AST using only *extensions*.

    A new parser is built for every call, so two calls with different
    extension sets never see each other's rules.
    """
    md = mistune.Markdown(
        renderer=None,
        inline=InlineParser(hard_wrap=True),
        plugins=[ext.install for ext in extensions],
    )
    return md(text)


# -----------------------------------------------------------------------------
# Token handlers
# -----------------------------------------------------------------------------
# Each handler has the mistune plugin-renderer shape:
#   handler(renderer, text, **attrs) -> str
# where *text* is the token's raw text or its rendered children.

def _is_external(url: str) -> bool:
    return url.lower().startswith(("http://", "https://"))


def render_link(renderer: SafeHTMLRenderer, text: str, url: str, title: str | None = None) -> str:
    attrs = [f'href="{renderer.safe_url(url)}"']
    if _is_external(url):
        attrs.append('target="_blank"')
        attrs.append('rel="noopener noreferrer"')
    if title:
        attrs.append(f'title="{_html.escape(_html.unescape(title))}"')
    return f'<a {" ".join(attrs)}>{text}</a>'


def render_image(renderer: SafeHTMLRenderer, text: str, url: str, title: str | None = None) -> str:
    alt = _html.escape(_html.unescape(_STRIP_TAGS_RE.sub("", text)))
    out = f'<img src="{renderer.safe_url(url)}" alt="{alt}" loading="lazy"'
    if title:
        out += f' title="{_html.escape(_html.unescape(title))}"'
    return out + " />"


def render_block_code(renderer: SafeHTMLRenderer, code: str, info: str | None = None) -> str:
    declared = info.split()[0] if info and info.strip() else ""

    if not renderer.options.enable_syntax_highlight:
        lang = _html.escape(declared or "text")
        return f'<pre><code class="language-{lang}">{_html.escape(code)}</code></pre>\n'

    result = highlight_code(code, declared or None)
    lang = _html.escape(result.language_used)
    return (
        '<div class="code-block">'
        f'<div class="code-header"><span class="code-language">{lang}</span></div>'
        f'<div class="highlight"><pre><code class="language-{lang}">{result.html}</code></pre></div>'
        '</div>\n'
    )


# ── Tables ──────────────────────────────────────────────────────────────────

def render_table(renderer: SafeHTMLRenderer, text: str) -> str:
    # Disabled tables are dropped outright rather than shown as pipe text.
    if not renderer.options.enable_tables:
        return ""
    return f'<div class="table-responsive"><table>\n{text}</table></div>\n'


def render_table_head(renderer: SafeHTMLRenderer, text: str) -> str:
    return f"<thead>\n<tr>\n{text}</tr>\n</thead>\n"


def render_table_body(renderer: SafeHTMLRenderer, text: str) -> str:
    return f"<tbody>\n{text}</tbody>\n"


def render_table_row(renderer: SafeHTMLRenderer, text: str) -> str:
    return f"<tr>\n{text}</tr>\n"


def render_table_cell(
    renderer: SafeHTMLRenderer, text: str, align: str | None = None, head: bool = False,
) -> str:
    tag = "th" if head else "td"
    align_attr = f' align="{align}"' if align else ""
    return f"<{tag}{align_attr}>{text}</{tag}>\n"


# ── Lists ───────────────────────────────────────────────────────────────────

def render_task_list_item(renderer: SafeHTMLRenderer, text: str, checked: bool = False) -> str:
    # Always disabled: a ticked box in the page is not persisted state.
    checkbox = (
        '<input type="checkbox" disabled'
        + (" checked" if checked else "")
        + ' class="task-list-item-checkbox" /> '
    )
    if text.startswith("<p>"):
        text = text.replace("<p>", "<p>" + checkbox, 1)
    else:
        text = checkbox + text
    return f'<li class="task-list-item">{text}</li>\n'


def render_strikethrough(renderer: SafeHTMLRenderer, text: str) -> str:
    return f"<del>{text}</del>"


# -----------------------------------------------------------------------------

DEFAULT_DISPATCH: Mapping[str, Handler] = MappingProxyType({
    "link":           render_link,
    "image":          render_image,
    "block_code":     render_block_code,
    "table":          render_table,
    "table_head":     render_table_head,
    "table_body":     render_table_body,
    "table_row":      render_table_row,
    "table_cell":     render_table_cell,
    TASK_LIST_ITEM:   render_task_list_item,
    "strikethrough":  render_strikethrough,
})


# -----------------------------------------------------------------------------

class SafeHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer driven by a token-type → handler table.

    Token types without a handler use mistune's own HTML method.  Raw HTML is
    passed through untouched; the sanitizer decides what survives.
    """

    def __init__(self, options: RenderOptions, dispatch: Mapping[str, Handler] | None = None):
        super().__init__(escape=False)
        self.options = options
        table = dict(DEFAULT_DISPATCH)
        if dispatch:
            table.update(dispatch)
        self.dispatch: Mapping[str, Handler] = MappingProxyType(table)

    def render_token(self, token: dict, state: BlockState) -> str:
        handler = self.dispatch.get(token["type"])
        if handler is None:
            return super().render_token(token, state)

        attrs = token.get("attrs") or {}
        if "raw" in token:
            return handler(self, token["raw"], **attrs)
        if "children" in token:
            return handler(self, self.render_tokens(token["children"], state), **attrs)
        return handler(self, **attrs)


def render_fragment(
    tokens: list[dict],
    options: RenderOptions,
    dispatch: Mapping[str, Handler] | None = None,
) -> str:
    """Render a token tree to (unsanitized) HTML."""
    renderer = SafeHTMLRenderer(options, dispatch)
    return renderer(tokens, BlockState())


# -----------------------------------------------------------------------------
# Fallback
# -----------------------------------------------------------------------------

def escape_fallback(text: str) -> str:
    """Show *text* literally: entity-escape it and turn newlines into <br/>."""
    return (
        text
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("\n", "<br/>")
    )


# -----------------------------------------------------------------------------
# Pipeline
# -----------------------------------------------------------------------------

PARSING = "parsing"
RENDERING = "rendering"
SANITIZING = "sanitizing"


class RenderError(Exception):
    """A pipeline stage failed; *cause* is the exception it raised."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage} failed: {cause!r}")
        self.stage = stage
        self.cause = cause


@dataclass(frozen=True)
class Ok:
    html: str


@dataclass(frozen=True)
class Err:
    error: RenderError


RenderOutcome = Union[Ok, Err]


def run_pipeline(
    source: str,
    options: RenderOptions,
    dispatch: Mapping[str, Handler] | None = None,
) -> RenderOutcome:
    stage = PARSING
    try:
        tokens = parse(source, extensions_for(options))
        stage = RENDERING
        fragment = render_fragment(tokens, options, dispatch)
        stage = SANITIZING
        return Ok(sanitize(fragment, policy_for(options)))
    except Exception as exc:
        return Err(RenderError(stage, exc))


# -----------------------------------------------------------------------------

def render(
    content: str,
    options: RenderOptions | None = None,
    dispatch: Mapping[str, Handler] | None = None,
) -> str:
    """
    Render markdown *content* to sanitized HTML.

    Parameters
    ----------
    content  : raw markdown, usually user-authored
    options  : per-call rendering options; defaults to ``RenderOptions()``
    dispatch : extra token handlers merged over ``DEFAULT_DISPATCH``

    Never raises.  On an internal failure the (possibly truncated) source is
    returned as escaped plain text.
    """
    if not content or not content.strip():
        return ""
    options = options or RenderOptions()
    source = truncate(content, options.max_length)

    outcome = run_pipeline(source, options, dispatch)
    if isinstance(outcome, Ok):
        return outcome.html

    log.error(
        "Markdown rendering failed while %s; falling back to escaped text",
        outcome.error.stage,
        exc_info=outcome.error.cause,
    )
    return escape_fallback(source)


# -----------------------------------------------------------------------------
# Memoized rendering
# -----------------------------------------------------------------------------

_render_memo = None


def _get_render_memo():
    global _render_memo
    if _render_memo is None:
        _render_memo = lru_cache(maxsize=get_settings().render_cache_size)(render)
    return _render_memo


def render_cached(content: str, options: RenderOptions | None = None) -> str:
    """``render`` memoized on (content, options); both are immutable."""
    return _get_render_memo()(content, options)


# -----------------------------------------------------------------------------
