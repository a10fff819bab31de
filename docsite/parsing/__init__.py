"""Document parsing: frontmatter, Markdown rendering and link rewriting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, Tuple

from ..errors import SourceReadError
from ..models import ParsedDocument, SourceDocument
from .frontmatter import FrontmatterError, split_frontmatter
from .links import DOCUMENT_SUFFIXES, rewrite_link, route_id_from_path
from .render import render_markdown


def read_document(path: Path, relative_path: str) -> SourceDocument:
    """Read a document from disk and split off its frontmatter."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, "read", str(exc)) from exc
    try:
        frontmatter, body = split_frontmatter(text)
    except FrontmatterError as exc:
        raise SourceReadError(path, "parse frontmatter", str(exc)) from exc
    return SourceDocument(
        relative_path=relative_path,
        text=text,
        frontmatter=frontmatter,
        body=body,
    )


@dataclass
class DocumentParser:
    """Converts source documents into HTML fragments."""

    diagram_languages: Sequence[str] = field(default_factory=lambda: ("mermaid",))
    content_prefix: str = "/content"
    home_route: str = "home"

    def parse(self, text: str, *, relative_path: str = "") -> ParsedDocument:
        """Parse raw document text. Raises ``SourceReadError`` on bad frontmatter."""
        try:
            frontmatter, body = split_frontmatter(text)
        except FrontmatterError as exc:
            raise SourceReadError(relative_path or "<text>", "parse frontmatter", str(exc)) from exc
        return self._convert(frontmatter, body, relative_path)

    def parse_file(self, path: Path, relative_path: str) -> Tuple[SourceDocument, ParsedDocument]:
        """Read and parse one file from the content root."""
        document = read_document(path, relative_path)
        try:
            parsed = self._convert(document.frontmatter, document.body, relative_path)
        except Exception as exc:  # extension failures surface as arbitrary exception types
            raise SourceReadError(path, "render", str(exc)) from exc
        return document, parsed

    def _convert(self, frontmatter: dict, body: str, relative_path: str) -> ParsedDocument:
        body_html, diagrams, headings = render_markdown(
            body,
            document_path=relative_path,
            diagram_languages=self.diagram_languages,
            content_prefix=self.content_prefix,
            home_route=self.home_route,
        )
        return ParsedDocument(
            frontmatter=dict(frontmatter),
            body_html=body_html,
            diagrams=diagrams,
            headings=headings,
        )


def parse_document(
    text: str,
    *,
    relative_path: str = "",
    diagram_languages: Sequence[str] = ("mermaid",),
    content_prefix: str = "/content",
) -> ParsedDocument:
    """Convenience wrapper around :class:`DocumentParser`."""
    parser = DocumentParser(diagram_languages=diagram_languages, content_prefix=content_prefix)
    return parser.parse(text, relative_path=relative_path)


__all__ = [
    "DOCUMENT_SUFFIXES",
    "DocumentParser",
    "parse_document",
    "read_document",
    "rewrite_link",
    "route_id_from_path",
]
