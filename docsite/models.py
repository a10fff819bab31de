"""Core data models shared across docsite components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class SourceDocument:
    """A Markdown document read from the content root."""

    relative_path: str
    text: str
    frontmatter: Dict[str, str]
    body: str


@dataclass(frozen=True)
class DiagramBlock:
    """Fenced code block whose language marks it for client-side diagram rendering."""

    language: str
    source: str
    index: int


@dataclass(frozen=True)
class Heading:
    """Heading extracted from a rendered document."""

    level: int
    text: str
    anchor: str


@dataclass
class ParsedDocument:
    """Result of converting one source document into an HTML fragment."""

    frontmatter: Dict[str, str]
    body_html: str
    diagrams: List[DiagramBlock] = field(default_factory=list)
    headings: List[Heading] = field(default_factory=list)

    @property
    def first_heading(self) -> Optional[Heading]:
        return self.headings[0] if self.headings else None


@dataclass
class RouteDescriptor:
    """One manifest entry. An empty id marks a category header."""

    id: str
    title: str
    category: Optional[str] = None
    order: int = 0

    @property
    def is_header(self) -> bool:
        return self.id == ""

    def to_dict(self) -> Dict[str, str]:
        # ``order`` only drives sorting at build time and is not part of the artifact.
        data = {"id": self.id, "title": self.title}
        if self.category:
            data["category"] = self.category
        return data

    @classmethod
    def from_dict(cls, payload: Any) -> "RouteDescriptor":
        if not isinstance(payload, dict):
            raise ValueError("Route descriptor must be an object")
        route_id = payload.get("id")
        title = payload.get("title")
        category = payload.get("category")
        if not isinstance(route_id, str) or not isinstance(title, str):
            raise ValueError("Route descriptor requires string id and title")
        if category is not None and not isinstance(category, str):
            raise ValueError("Route descriptor category must be a string")
        return cls(id=route_id, title=title, category=category or None)


@dataclass
class RouteManifest:
    """Ordered sequence of route descriptors; order is navigation order."""

    descriptors: List[RouteDescriptor] = field(default_factory=list)

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def routes(self) -> List[RouteDescriptor]:
        """Return navigable descriptors only."""
        return [descriptor for descriptor in self.descriptors if not descriptor.is_header]

    def find(self, route_id: str) -> Optional[RouteDescriptor]:
        for descriptor in self.descriptors:
            if not descriptor.is_header and descriptor.id == route_id:
                return descriptor
        return None

    def to_json(self) -> str:
        payload = [descriptor.to_dict() for descriptor in self.descriptors]
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_json(cls, text: str) -> "RouteManifest":
        payload = json.loads(text)
        if not isinstance(payload, list):
            raise ValueError("Route manifest must be a JSON array")
        return cls([RouteDescriptor.from_dict(item) for item in payload])
