#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Grammar extensions
==================
An extension is a named installer that adds block/inline rules or parse hooks
to one ``mistune.Markdown`` instance.  ``extensions_for`` picks the set for a
render call from its options; nothing here touches a shared parser.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Callable, NamedTuple

from mistune.plugins.formatting import strikethrough
from mistune.plugins.table import table, table_in_list, table_in_quote
from mistune.plugins.task_lists import task_lists
from mistune.plugins.url import url

from richtext.schemas import RenderOptions


# -----------------------------------------------------------------------------

class Extension(NamedTuple):
    name: str
    install: Callable


# -----------------------------------------------------------------------------

# Token type the task_lists plugin gives a list item that starts with [ ] or [x].
TASK_LIST_ITEM = "task_list_item"

TABLE          = Extension("table",          table)
TABLE_IN_QUOTE = Extension("table_in_quote", table_in_quote)
TABLE_IN_LIST  = Extension("table_in_list",  table_in_list)
STRIKETHROUGH  = Extension("strikethrough",  strikethrough)
TASK_LIST      = Extension("task_list",      task_lists)
LINKIFY        = Extension("url",            url)


def extensions_for(options: RenderOptions) -> tuple[Extension, ...]:
    """
    Return the extensions active for one render call.

    Tables are always recognised, at top level and inside block quotes and
    list items, so that a disabled table can be dropped by the renderer
    instead of leaking as pipe-delimited text.  ``table`` must precede the
    nested variants, which reuse its rules.
    """
    active = [TABLE, TABLE_IN_QUOTE, TABLE_IN_LIST, STRIKETHROUGH]
    if options.enable_task_lists:
        active.append(TASK_LIST)
    if options.enable_linkify:
        active.append(LINKIFY)
    return tuple(active)


# -----------------------------------------------------------------------------
