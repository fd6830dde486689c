#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the raw-markdown length limit applied before parsing."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from richtext.services.truncation import ELLIPSIS, truncate


# =============================================================================
# Identity cases
# =============================================================================

def test_no_max_length_is_identity():
    assert truncate("The quick brown fox") == "The quick brown fox"


def test_zero_max_length_is_identity():
    assert truncate("The quick brown fox", 0) == "The quick brown fox"


def test_short_text_is_unchanged():
    assert truncate("hello", 10) == "hello"


def test_text_of_exactly_max_length_is_unchanged():
    assert truncate("hello", 5) == "hello"


# =============================================================================
# Word boundaries
# =============================================================================

def test_space_outside_window_cuts_mid_word():
    # The last space (index 9) is before 0.8 * 12, so no retraction.
    assert truncate("The quick brown fox", 12) == "The quick br" + ELLIPSIS


def test_space_inside_window_retracts_to_word_boundary():
    # Cut "The quick b": last space at 9 >= 8.8.
    assert truncate("The quick brown fox", 11) == "The quick" + ELLIPSIS


def test_space_exactly_at_window_start_counts():
    # Cut "abcd ": last space at 4 == 0.8 * 5.
    assert truncate("abcd efghij", 5) == "abcd" + ELLIPSIS


def test_no_space_at_all_hard_cuts():
    assert truncate("abcdefghij", 5) == "abcde" + ELLIPSIS


def test_cut_at_word_end_keeps_whole_word():
    out = truncate("The quick brown fox jumps", 15)
    assert out == "The quick brown" + ELLIPSIS


# =============================================================================
# Known limitation: markdown constructs can be split
# =============================================================================

def test_link_syntax_may_be_split():
    out = truncate("see [the docs](http://example.com/long/path)", 20)
    assert out.endswith(ELLIPSIS)
    assert ")" not in out


# -----------------------------------------------------------------------------
