"""Searchable record view and search result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class RecordKind(str, Enum):
    TREATMENT = "treatment"
    CONDITION = "condition"
    RESOURCE = "resource"


def _as_map(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class SearchableRecord:
    """A treatment, condition or resource as seen by the search component.

    ``metadata`` and ``content`` are open maps of arbitrary JSON values; only
    ``metadata["category"]``, ``metadata["brand_names"]`` and
    ``content["description"]`` carry meaning here.
    """

    id: str
    name: str
    slug: str = ""
    description: str | None = None
    category: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    content: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SearchableRecord:
        """Build a record from an upstream mapping (``title``/``data`` fallbacks)."""
        content = row.get("content")
        if content is None:
            content = row.get("data")
        return cls(
            id=str(row.get("id", "")),
            name=_as_text(row.get("name")) or _as_text(row.get("title")) or "",
            slug=_as_text(row.get("slug")) or "",
            description=_as_text(row.get("description")),
            category=_as_text(row.get("category")),
            metadata=_as_map(row.get("metadata")),
            content=_as_map(content),
        )

    @property
    def resolved_description(self) -> str | None:
        if self.description:
            return self.description
        return _as_text(self.content.get("description")) or None

    @property
    def resolved_category(self) -> str | None:
        if self.category:
            return self.category
        return _as_text(self.metadata.get("category")) or None

    @property
    def brand_names(self) -> list[str]:
        raw = self.metadata.get("brand_names")
        if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
            return []
        return [name for name in raw if isinstance(name, str)]


@dataclass(frozen=True)
class Snippet:
    term: str
    field: str
    snippet: str


@dataclass
class SearchResult:
    type: RecordKind
    id: str
    slug: str
    name: str
    description: str | None
    category: str | None
    snippets: list[Snippet]
    match_count: int
    # Ranking input only; not part of the response payload.
    brand_names: list[str] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "snippets": [
                {"term": s.term, "field": s.field, "snippet": s.snippet}
                for s in self.snippets
            ],
            "matchCount": self.match_count,
        }
