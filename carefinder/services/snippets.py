"""Per-term match snippets for result highlighting.

Each query term gets at most one snippet, taken from the first field that
yields one: name, description, category, then the serialized content blob.
Every text transformation is followed by a check that the (folded) snippet
still contains the term; a snippet that fails the check is dropped rather
than shown with a highlight it does not contain.
"""

from __future__ import annotations

import re
from typing import Callable

from carefinder.services.records import SearchableRecord, Snippet
from carefinder.services.search_text import clean_whitespace, fold, to_search_text

DESCRIPTION_CONTEXT = 80
CONTENT_CONTEXT = 100
CONTENT_FOCUS = 60
ELLIPSIS = "..."

FIELD_NAME = "Name"
FIELD_DESCRIPTION = "Description"
FIELD_CATEGORY = "Category"
FIELD_CONTENT = "Content"

_JSON_SYNTAX_RE = re.compile(r'[{}\[\]":,]')


def _contains(text: str, term: str) -> bool:
    return term in fold(text)


def _window(text: str, index: int, term: str, context: int) -> tuple[int, int]:
    start = max(0, index - context)
    end = min(len(text), index + len(term) + context)
    return start, end


def _whole_field(field_name: str, value: str | None, term: str) -> Snippet | None:
    cleaned = clean_whitespace(value)
    if cleaned and _contains(cleaned, term):
        return Snippet(term=term, field=field_name, snippet=cleaned)
    return None


def name_snippet(record: SearchableRecord, term: str) -> Snippet | None:
    return _whole_field(FIELD_NAME, record.name, term)


def description_snippet(record: SearchableRecord, term: str) -> Snippet | None:
    description = record.resolved_description
    if not description:
        return None

    # Folded offsets are reused on the original text. If lower() changed the
    # length (e.g. "İ"), the window is off and the containment check drops it.
    index = fold(description).find(term)
    if index < 0:
        return None

    start, end = _window(description, index, term, DESCRIPTION_CONTEXT)
    excerpt = clean_whitespace(description[start:end])
    if not _contains(excerpt, term):
        return None

    prefix = ELLIPSIS if start > 0 else ""
    suffix = ELLIPSIS if end < len(description) else ""
    return Snippet(term=term, field=FIELD_DESCRIPTION, snippet=f"{prefix}{excerpt}{suffix}")


def category_snippet(record: SearchableRecord, term: str) -> Snippet | None:
    return _whole_field(FIELD_CATEGORY, record.resolved_category, term)


def content_snippet(record: SearchableRecord, term: str) -> Snippet | None:
    if not record.content:
        return None

    blob = to_search_text(record.content)
    index = fold(blob).find(term)
    if index < 0:
        return None

    start, end = _window(blob, index, term, CONTENT_CONTEXT)
    raw = blob[start:end]
    if not _contains(raw, term):
        return None

    stripped = clean_whitespace(_JSON_SYNTAX_RE.sub(" ", raw))
    if not _contains(stripped, term):
        return None

    focus = fold(stripped).find(term)
    focus_start, focus_end = _window(stripped, focus, term, CONTENT_FOCUS)
    excerpt = stripped[focus_start:focus_end].strip()
    if not _contains(excerpt, term):
        return None

    prefix = ELLIPSIS if start > 0 or focus_start > 0 else ""
    suffix = ELLIPSIS if end < len(blob) or focus_end < len(stripped) else ""
    return Snippet(term=term, field=FIELD_CONTENT, snippet=f"{prefix}{excerpt}{suffix}")


_EXTRACTORS: tuple[Callable[[SearchableRecord, str], Snippet | None], ...] = (
    name_snippet,
    description_snippet,
    category_snippet,
    content_snippet,
)


def snippet_for_term(record: SearchableRecord, term: str) -> Snippet | None:
    """Return the first verified snippet for *term*, or ``None``."""
    for extract in _EXTRACTORS:
        snippet = extract(record, term)
        if snippet is not None:
            return snippet
    return None


def extract_snippets(record: SearchableRecord, terms: list[str]) -> list[Snippet]:
    """One snippet per term where one can be found; terms without one are skipped."""
    snippets = []
    for term in terms:
        snippet = snippet_for_term(record, term)
        if snippet is not None:
            snippets.append(snippet)
    return snippets
