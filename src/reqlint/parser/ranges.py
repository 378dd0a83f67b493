"""Map parse-error offsets to highlightable token spans.

JSON parse errors frequently point at a delimiter or at whitespace rather
than at the malformed token itself (a missing comma is reported at the
*next* token).  ``find_error_ranges`` widens the offset to the nearest whole
token so a renderer has something visible to mark.
"""

from __future__ import annotations

from collections.abc import Iterable

from reqlint.models.diagnostics import HighlightRange

_STRUCTURAL = frozenset("{}[],:")
_WHITESPACE = frozenset(" \t\n\r")
_BOUNDARY = _STRUCTURAL | _WHITESPACE


def find_error_ranges(text: str, offset: int | None) -> list[HighlightRange]:
    """Return the token span around *offset* (at most one range).

    Out-of-bounds or missing offsets yield an empty list.
    """
    if offset is None or offset < 0 or offset >= len(text):
        return []

    anchor = offset
    if text[offset] in _WHITESPACE:
        left = offset
        while left > 0 and text[left - 1] in _WHITESPACE:
            left -= 1
        right = offset
        while right < len(text) and text[right] in _WHITESPACE:
            right += 1

        # Prefer the token on the left, then the one on the right; punctuation
        # on both sides leaves only the whitespace character itself.
        if left > 0 and text[left - 1] not in _STRUCTURAL:
            anchor = left
        elif right < len(text) and text[right] not in _STRUCTURAL:
            anchor = right
        else:
            return [HighlightRange(start=offset, end=offset + 1)]

    start = anchor
    while start > 0 and text[start - 1] not in _BOUNDARY:
        start -= 1
    end = anchor
    while end < len(text) and text[end] not in _BOUNDARY:
        end += 1

    if start == end:
        end = min(start + 1, len(text))
    return [HighlightRange(start=start, end=end)]


def merge_ranges(ranges: Iterable[HighlightRange]) -> list[HighlightRange]:
    """Sort ranges and merge the overlapping or adjacent ones."""
    merged: list[HighlightRange] = []
    for rng in sorted(ranges, key=lambda r: (r.start, r.end)):
        if merged and rng.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = HighlightRange(start=last.start, end=max(last.end, rng.end))
        else:
            merged.append(rng)
    return merged


def split_highlights(text: str, ranges: Iterable[HighlightRange]) -> list[tuple[str, bool]]:
    """Split *text* into ``(segment, highlighted)`` pieces.

    Ranges are clamped to the text and merged first, so the segments always
    concatenate back to *text*.
    """
    clamped = [
        HighlightRange(start=r.start, end=min(r.end, len(text)))
        for r in ranges
        if r.start < len(text)
    ]
    segments: list[tuple[str, bool]] = []
    cursor = 0
    for rng in merge_ranges(clamped):
        if rng.start > cursor:
            segments.append((text[cursor : rng.start], False))
        segments.append((text[rng.start : rng.end], True))
        cursor = rng.end
    if cursor < len(text):
        segments.append((text[cursor:], False))
    return segments
