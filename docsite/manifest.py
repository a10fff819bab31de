"""Route manifest derivation and fragment output."""

from __future__ import annotations

import filecmp
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List, Mapping, Optional, Sequence

from .errors import SourceReadError, WriteError
from .logging import get_logger
from .models import ParsedDocument, RouteDescriptor, RouteManifest, SourceDocument
from .parsing import DocumentParser, route_id_from_path
from .scanner import ContentFile, ContentScanner
from .utils import atomic_write_text, ensure_directory, humanize_name

CONTENT_DIRNAME = "content"
MANIFEST_FILENAME = "routes.json"

_ORDER_KEYS = ("order", "sidebar_position", "weight")

# Non-document files under the content root that fragments may link to.
MEDIA_SUFFIXES = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".webp",
    ".ico",
    ".pdf",
    ".txt",
    ".json",
)


@dataclass
class ManifestBuildResult:
    """Outcome of one manifest build."""

    manifest: RouteManifest
    manifest_path: Path
    fragments: Dict[str, Path] = field(default_factory=dict)
    media: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class _Entry:
    content_file: ContentFile
    descriptor: RouteDescriptor
    parsed: ParsedDocument


class RouteManifestBuilder:
    """Walks a content root, renders each document and writes the manifest."""

    def __init__(
        self,
        parser: DocumentParser | None = None,
        scanner: ContentScanner | None = None,
        *,
        media_scanner: ContentScanner | None = None,
        home_route: str = "home",
        categories: Mapping[str, str] | None = None,
    ) -> None:
        self.parser = parser or DocumentParser(home_route=home_route)
        self.scanner = scanner or ContentScanner()
        self.media_scanner = media_scanner or ContentScanner(suffixes=MEDIA_SUFFIXES)
        self.home_route = home_route
        self.categories = dict(categories or {})
        self.logger = get_logger("manifest")

    def build(self, content_root: Path, output_root: Path) -> ManifestBuildResult:
        """Render every document under ``content_root`` into ``output_root/content``."""
        files = self.scanner.scan(content_root)
        self.logger.info("Found %d documents under %s", len(files), content_root)

        warnings: List[str] = []
        skipped: List[str] = []
        entries: List[_Entry] = []
        seen: Dict[str, str] = {}

        for content_file in files:
            try:
                document, parsed = self.parser.parse_file(
                    content_file.path, content_file.relative_path
                )
            except SourceReadError as exc:
                message = f"Skipping {content_file.relative_path}: {exc.operation} failed ({exc.reason})"
                self.logger.warning(message)
                warnings.append(message)
                skipped.append(content_file.relative_path)
                continue

            descriptor = self.describe(document, parsed)
            if descriptor.id in seen:
                message = (
                    f"Skipping {content_file.relative_path}: route '{descriptor.id}' "
                    f"already produced by {seen[descriptor.id]}"
                )
                self.logger.warning(message)
                warnings.append(message)
                skipped.append(content_file.relative_path)
                continue
            seen[descriptor.id] = content_file.relative_path
            entries.append(_Entry(content_file, descriptor, parsed))

        manifest = self.assemble([entry.descriptor for entry in entries])

        content_dir = Path(output_root) / CONTENT_DIRNAME
        ensure_directory(content_dir)
        fragments: Dict[str, Path] = {}
        for entry in entries:
            fragment_path = fragment_path_for(content_dir, entry.descriptor.id)
            atomic_write_text(fragment_path, _fragment_text(entry.parsed))
            fragments[entry.descriptor.id] = fragment_path
            self.logger.debug("Wrote %s", fragment_path)

        media = self.copy_media(content_root, content_dir)

        manifest_path = content_dir / MANIFEST_FILENAME
        atomic_write_text(manifest_path, manifest.to_json())
        self.logger.info(
            "Wrote %s with %d routes (%d skipped)",
            manifest_path,
            len(manifest.routes()),
            len(skipped),
        )
        return ManifestBuildResult(
            manifest=manifest,
            manifest_path=manifest_path,
            fragments=fragments,
            media=media,
            skipped=skipped,
            warnings=warnings,
        )

    def copy_media(self, content_root: Path, content_dir: Path) -> List[str]:
        """Mirror linked media files into the output content directory.

        Files whose bytes already match are left untouched.
        """
        copied: List[str] = []
        for media_file in self.media_scanner.scan(content_root):
            if media_file.relative_path == MANIFEST_FILENAME:
                continue
            dest = content_dir.joinpath(*media_file.relative_path.split("/"))
            if dest.is_file() and filecmp.cmp(media_file.path, dest, shallow=False):
                continue
            ensure_directory(dest.parent)
            try:
                shutil.copyfile(media_file.path, dest)
            except OSError as exc:
                raise WriteError(dest, "copy", str(exc)) from exc
            copied.append(media_file.relative_path)
            self.logger.debug("Copied %s to %s", media_file.path, dest)
        return copied

    def describe(self, document: SourceDocument, parsed: ParsedDocument) -> RouteDescriptor:
        """Compute the route descriptor for one parsed document."""
        relative = PurePosixPath(document.relative_path)
        route_id = route_id_from_path(document.relative_path, home_route=self.home_route)

        title = document.frontmatter.get("title", "").strip()
        if not title and parsed.first_heading is not None:
            title = parsed.first_heading.text
        if not title:
            title = humanize_name(relative.stem)

        category: Optional[str] = document.frontmatter.get("category", "").strip() or None
        if category is None and len(relative.parts) > 1:
            category = relative.parts[0]

        return RouteDescriptor(
            id=route_id,
            title=title,
            category=category,
            order=_order_from(document.frontmatter),
        )

    def assemble(self, descriptors: Sequence[RouteDescriptor]) -> RouteManifest:
        """Group descriptors by category and insert one header per category.

        Uncategorised routes come first. Categories named in the configuration
        follow in configured order, then the rest in discovery order. Members
        keep their discovery order within an equal ``order`` rank.
        """
        uncategorised: List[RouteDescriptor] = []
        groups: Dict[str, List[RouteDescriptor]] = {}
        for descriptor in descriptors:
            if descriptor.category is None:
                uncategorised.append(descriptor)
            else:
                groups.setdefault(descriptor.category, []).append(descriptor)

        ordered_categories = [name for name in self.categories if name in groups]
        ordered_categories.extend(name for name in groups if name not in self.categories)

        result: List[RouteDescriptor] = _ranked(uncategorised)
        for name in ordered_categories:
            title = self.categories.get(name) or humanize_name(name)
            result.append(RouteDescriptor(id="", title=title, category=name))
            result.extend(_ranked(groups[name]))
        return RouteManifest(result)


def fragment_path_for(content_dir: Path, route_id: str) -> Path:
    *parents, name = route_id.split("/")
    return content_dir.joinpath(*parents, f"{name}.html")


def load_manifest(output_root: Path) -> RouteManifest:
    path = Path(output_root) / CONTENT_DIRNAME / MANIFEST_FILENAME
    return RouteManifest.from_json(path.read_text(encoding="utf-8"))


def _ranked(descriptors: Sequence[RouteDescriptor]) -> List[RouteDescriptor]:
    # sorted() is stable, so equal ranks keep the sorted-walk order.
    return sorted(descriptors, key=lambda descriptor: descriptor.order)


def _order_from(frontmatter: Mapping[str, str]) -> int:
    for key in _ORDER_KEYS:
        value = frontmatter.get(key)
        if value is None:
            continue
        try:
            return int(str(value).strip())
        except ValueError:
            continue
    return 0


def _fragment_text(parsed: ParsedDocument) -> str:
    return parsed.body_html.rstrip("\n") + "\n"


__all__ = [
    "CONTENT_DIRNAME",
    "MANIFEST_FILENAME",
    "MEDIA_SUFFIXES",
    "ManifestBuildResult",
    "RouteManifestBuilder",
    "fragment_path_for",
    "load_manifest",
]
