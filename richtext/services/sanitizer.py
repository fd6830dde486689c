#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
HTML sanitization
=================
The single security gate for rendered output.  Everything the normal render
path returns has been through ``sanitize``.

The policy is an allow-list: tags, attributes per tag, and URI schemes for
``href``/``src``.  ``ALWAYS_FORBIDDEN_TAGS`` are removed from the allowed set
whatever the caller asks for; caller overrides may only narrow the policy.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import bleach
from bleach.html5lib_shim import Filter

from richtext.schemas import RenderOptions, SanitizeOverrides


# -----------------------------------------------------------------------------

ALWAYS_FORBIDDEN_TAGS: frozenset[str] = frozenset({
    "script", "style", "iframe", "object", "embed",
    "form", "textarea", "select", "button",
})

ALLOWED_PROTOCOLS: frozenset[str] = frozenset({
    "http", "https", "mailto", "tel", "callto", "sms", "cid", "xmpp",
})

_GLOBAL_ATTRIBUTES = frozenset({"class", "id", "title"})

ALLOWED_ATTRIBUTES: Mapping[str, frozenset[str]] = MappingProxyType({
    "*":      _GLOBAL_ATTRIBUTES,
    "a":      frozenset({"href", "title", "target", "rel"}),
    "img":    frozenset({"src", "alt", "title", "loading", "width", "height"}),
    "video":  frozenset({"src", "width", "height", "controls", "poster"}),
    "audio":  frozenset({"src", "controls"}),
    "ol":     frozenset({"start"}),
    "th":     frozenset({"colspan", "rowspan", "align"}),
    "td":     frozenset({"colspan", "rowspan", "align"}),
    "input":  frozenset({"type", "checked", "disabled"}),
})

# Only read-only checkboxes survive as <input>.
_INPUT_TYPES = frozenset({"checkbox"})

# Removed along with everything inside them, not just unwrapped.
DROP_CONTENT_TAGS: frozenset[str] = frozenset({"script", "style"})


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SanitizePolicy:
    allowed_tags:       frozenset[str]
    allowed_attributes: Mapping[str, frozenset[str]]
    allowed_protocols:  frozenset[str]

    def attribute_filter(self, tag: str, name: str, value: str) -> bool:
        """bleach attribute callback: is *name* allowed on *tag*?"""
        allowed = self.allowed_attributes.get(tag, frozenset()) | self.allowed_attributes.get("*", frozenset())
        if name not in allowed:
            return False
        if tag == "input" and name == "type":
            return value.lower() in _INPUT_TYPES
        return True


# -----------------------------------------------------------------------------

def build_policy(
    allowed_tags: frozenset[str],
    overrides: SanitizeOverrides | None = None,
) -> SanitizePolicy:
    """
    Combine the caller's tag list with the fixed attribute/protocol
    allow-lists, apply narrowing *overrides*, then drop every forbidden tag.
    """
    tags = frozenset(allowed_tags)
    attributes = dict(ALLOWED_ATTRIBUTES)
    protocols = ALLOWED_PROTOCOLS
    forbidden = ALWAYS_FORBIDDEN_TAGS

    if overrides is not None:
        if overrides.allowed_tags is not None:
            tags &= overrides.allowed_tags
        if overrides.allowed_attributes is not None:
            attributes = {tag: names & overrides.allowed_attributes for tag, names in attributes.items()}
        if overrides.allowed_protocols is not None:
            protocols &= overrides.allowed_protocols
        forbidden |= overrides.forbidden_tags

    return SanitizePolicy(
        allowed_tags=tags - forbidden,
        allowed_attributes=MappingProxyType(attributes),
        allowed_protocols=protocols,
    )


def policy_for(options: RenderOptions) -> SanitizePolicy:
    return build_policy(options.allowed_tags, options.sanitize_overrides)


# -----------------------------------------------------------------------------
# html5lib stream filters
# -----------------------------------------------------------------------------

class DropElementContent(Filter):
    """Remove ``DROP_CONTENT_TAGS`` elements and every token inside them.

    Runs on the parsed tree ahead of bleach, which would otherwise strip the
    tags but keep the script or stylesheet source as visible text.
    """

    def __iter__(self):
        depth = 0
        for token in super().__iter__():
            kind = token["type"]
            if kind in ("StartTag", "EndTag") and token.get("name") in DROP_CONTENT_TAGS:
                depth += 1 if kind == "StartTag" else -1
                depth = max(depth, 0)
                continue
            if not depth:
                yield token


class ReadOnlyInputs(Filter):
    """Drop any ``<input>`` that is not a checkbox and disable the rest."""

    def __iter__(self):
        for token in super().__iter__():
            if token["type"] in ("StartTag", "EmptyTag") and token.get("name") == "input":
                attrs = dict(token.get("data") or {})
                if attrs.get((None, "type"), "").lower() not in _INPUT_TYPES:
                    continue
                attrs.setdefault((None, "disabled"), "")
                token = {**token, "data": attrs}
            elif token["type"] == "EndTag" and token.get("name") == "input":
                continue
            yield token


class _Cleaner(bleach.Cleaner):

    def __init__(self, **kwargs):
        super().__init__(filters=[ReadOnlyInputs], **kwargs)
        walker = self.walker
        self.walker = lambda dom: DropElementContent(walker(dom))


# -----------------------------------------------------------------------------

def sanitize(html: str, policy: SanitizePolicy) -> str:
    """Strip everything *policy* does not allow from *html*.

    Disallowed tags are removed but their text is kept (escaped), except for
    ``script`` and ``style`` whose content goes too.  Comments are removed and
    surviving ``<input>`` checkboxes are always ``disabled``.  Running the
    output through ``sanitize`` again is a no-op.
    """
    # Cleaner instances are not thread-safe, so one per call.
    cleaner = _Cleaner(
        tags=policy.allowed_tags,
        attributes=policy.attribute_filter,
        protocols=policy.allowed_protocols,
        strip=True,
        strip_comments=True,
    )
    return cleaner.clean(html)


# -----------------------------------------------------------------------------
