"""Markdown to HTML fragment conversion built on Python-Markdown."""

from __future__ import annotations

import html
import re
from typing import Iterable, List, Sequence
from xml.etree.ElementTree import Element

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from ..models import DiagramBlock, Heading
from .links import rewrite_link

BASE_EXTENSIONS = ("fenced_code", "tables", "toc", "attr_list", "sane_lists")

# Runs ahead of fenced_code (priority 25) so diagram fences never reach it.
_DIAGRAM_PRIORITY = 30
_LINK_PRIORITY = 4


class DiagramFencePreprocessor(Preprocessor):
    """Stashes diagram fences as flagged ``<pre>`` blocks with the source untouched."""

    FENCE_RE = re.compile(
        r"""
        (?P<fence>^(?:~{3,}|`{3,}))[ ]*      # opening fence
        \{?\.?(?P<lang>[\w#.+-]*)\}?         # optional language
        [^\n]*\n                             # rest of opening line
        (?P<code>.*?)(?<=\n)
        (?P=fence)[ ]*$                      # closing fence
        """,
        re.MULTILINE | re.DOTALL | re.VERBOSE,
    )

    def __init__(self, md: markdown.Markdown, extension: "DocsiteExtension") -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: List[str]) -> List[str]:
        text = "\n".join(lines)
        languages = self.extension.diagram_languages

        def _replace(match: re.Match[str]) -> str:
            language = match.group("lang").lower()
            if language not in languages:
                return match.group(0)
            source = match.group("code")
            self.extension.diagrams.append(
                DiagramBlock(
                    language=language,
                    source=source,
                    index=len(self.extension.diagrams),
                )
            )
            block = (
                f'<pre class="diagram" data-diagram="{language}">'
                f'<code class="language-{language}">{html.escape(source, quote=False)}</code></pre>'
            )
            placeholder = self.md.htmlStash.store(block)
            return f"\n{placeholder}\n"

        return self.FENCE_RE.sub(_replace, text).split("\n")


class LinkRewriteTreeprocessor(Treeprocessor):
    """Points relative links and images at their location in the output tree."""

    def __init__(self, md: markdown.Markdown, extension: "DocsiteExtension") -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> None:
        for element in root.iter("a"):
            self._rewrite(element, "href")
        for element in root.iter("img"):
            self._rewrite(element, "src")

    def _rewrite(self, element: Element, attribute: str) -> None:
        value = element.get(attribute)
        if not value:
            return
        rewritten = rewrite_link(
            value,
            document_path=self.extension.document_path,
            content_prefix=self.extension.content_prefix,
            home_route=self.extension.home_route,
        )
        if rewritten is None:
            return
        if attribute == "src" and rewritten.route_id is not None:
            return
        element.set(attribute, rewritten.href)
        if rewritten.anchor:
            element.set("data-anchor", rewritten.anchor)


class DocsiteExtension(Extension):
    """Per-document extension state: diagram collection and link rewriting."""

    def __init__(
        self,
        *,
        document_path: str,
        diagram_languages: Iterable[str],
        content_prefix: str,
        home_route: str,
    ) -> None:
        super().__init__()
        self.document_path = document_path
        self.diagram_languages = frozenset(language.lower() for language in diagram_languages)
        self.content_prefix = content_prefix
        self.home_route = home_route
        self.diagrams: List[DiagramBlock] = []

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802 - Python-Markdown API
        md.preprocessors.register(
            DiagramFencePreprocessor(md, self), "docsite_diagrams", _DIAGRAM_PRIORITY
        )
        md.treeprocessors.register(
            LinkRewriteTreeprocessor(md, self), "docsite_links", _LINK_PRIORITY
        )


def render_markdown(
    body: str,
    *,
    document_path: str = "",
    diagram_languages: Sequence[str] = ("mermaid",),
    content_prefix: str = "/content",
    home_route: str = "home",
) -> tuple[str, List[DiagramBlock], List[Heading]]:
    """Convert Markdown ``body`` into ``(html, diagrams, headings)``."""
    extension = DocsiteExtension(
        document_path=document_path,
        diagram_languages=diagram_languages,
        content_prefix=content_prefix,
        home_route=home_route,
    )
    md = markdown.Markdown(
        extensions=[*BASE_EXTENSIONS, extension],
        extension_configs={"toc": {"permalink": False}},
        output_format="html",
    )
    body_html = md.convert(body)
    headings = list(_flatten_toc(getattr(md, "toc_tokens", [])))
    return body_html, list(extension.diagrams), headings


def _flatten_toc(tokens: Iterable[dict]) -> Iterable[Heading]:
    for token in tokens:
        yield Heading(
            level=int(token.get("level", 1)),
            text=html.unescape(str(token.get("name", ""))).strip(),
            anchor=str(token.get("id", "")),
        )
        yield from _flatten_toc(token.get("children", []))


__all__ = ["BASE_EXTENSIONS", "DocsiteExtension", "render_markdown"]
