"""Application results – highlight markup to neutral spans.

The engine wraps matched terms in ``<mark>…</mark>`` (or ``<em>…</em>``, or
whatever tags the request configured). :func:`to_spans` turns that into a
tuple of :class:`HighlightSpan`. Adjacent spans of the same kind are merged
and empty spans dropped, so the output is canonical and converting it again
is a no-op.
"""
from __future__ import annotations

import dataclasses
import re
from typing import Iterable, Sequence

DEFAULT_TAGS: tuple[tuple[str, str], ...] = (("<mark>", "</mark>"), ("<em>", "</em>"))


@dataclasses.dataclass(frozen=True)
class HighlightSpan:
    text: str
    is_match: bool = False


Spans = tuple[HighlightSpan, ...]


def to_spans(
    value: str | Sequence[HighlightSpan] | None,
    tags: Iterable[tuple[str, str]] = DEFAULT_TAGS,
) -> Spans:
    """Convert highlight markup (or an existing span list) into canonical spans."""
    if value is None:
        return ()
    if isinstance(value, str):
        return _merge(_parse_markup(value, tuple(tags)))
    return _merge(value)


def plain_text(spans: Sequence[HighlightSpan]) -> str:
    return "".join(span.text for span in spans)


def matched_terms(spans: Sequence[HighlightSpan]) -> list[str]:
    return [span.text for span in spans if span.is_match]


def _parse_markup(text: str, tags: tuple[tuple[str, str], ...]) -> list[HighlightSpan]:
    openers = {start: end for start, end in tags}
    closers = {end for _, end in tags}
    pattern = re.compile("|".join(re.escape(t) for t in sorted({*openers, *closers}, key=len, reverse=True)))

    spans: list[HighlightSpan] = []
    depth = 0
    cursor = 0
    for match in pattern.finditer(text):
        if match.start() > cursor:
            spans.append(HighlightSpan(text[cursor:match.start()], depth > 0))
        tag = match.group(0)
        if tag in openers:
            depth += 1
        elif depth > 0:
            depth -= 1
        else:
            # Stray closing tag: keep it as text.
            spans.append(HighlightSpan(tag, False))
        cursor = match.end()
    if cursor < len(text):
        spans.append(HighlightSpan(text[cursor:], depth > 0))
    return spans


def _merge(spans: Iterable[HighlightSpan]) -> Spans:
    merged: list[HighlightSpan] = []
    for span in spans:
        if not span.text:
            continue
        if merged and merged[-1].is_match == span.is_match:
            merged[-1] = HighlightSpan(merged[-1].text + span.text, span.is_match)
        else:
            merged.append(HighlightSpan(span.text, bool(span.is_match)))
    return tuple(merged)


__all__ = ["DEFAULT_TAGS", "HighlightSpan", "Spans", "matched_terms", "plain_text", "to_spans"]
