#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Length limiting for post previews.

Truncation runs on the raw markdown, before parsing, so a cut can land inside
a link, image or code fence and leave a half-written construct in the
preview.  That is a known limitation; brackets are not re-balanced.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


ELLIPSIS = "..."

# A space in the last 20% of the cut window is close enough to retract to.
WORD_BOUNDARY_RATIO = 0.8


# -----------------------------------------------------------------------------

def truncate(text: str, max_length: int | None = None) -> str:
    """Shorten *text* to *max_length* characters plus an ellipsis, preferring
    to cut at a word boundary.  Returns *text* unchanged when *max_length* is
    unset or the text already fits."""
    if not max_length or len(text) <= max_length:
        return text

    cut = text[:max_length]
    last_space = cut.rfind(" ")
    if last_space >= max_length * WORD_BOUNDARY_RATIO:
        cut = cut[:last_space]
    return cut + ELLIPSIS


# -----------------------------------------------------------------------------
