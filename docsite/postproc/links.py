"""Link validation for a built site."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from urllib.parse import unquote, urlsplit

from ..client.router import ContentRouter, Fetcher, route_from_hash
from ..errors import FetchError
from ..manifest import CONTENT_DIRNAME
from ..models import RouteManifest


def site_file(output_root: Path, url: str) -> Optional[Path]:
    """Map a site URL to the file the static server would serve from ``output_root``."""
    root = Path(output_root).resolve()
    relative = unquote(urlsplit(url).path).lstrip("/")
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


def output_fetcher(output_root: Path) -> Fetcher:
    """Return a fetch callable that resolves site URLs against ``output_root``."""

    def fetch(url: str) -> str:
        candidate = site_file(output_root, url)
        if candidate is None:
            raise FetchError(url, 404)
        try:
            return candidate.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(url) from exc

    return fetch


class LinkValidator:
    """Ensures manifest routes load and in-content route links resolve."""

    _ROUTE_LINK_PATTERN = re.compile(r"""href=(["'])(#/[^"']*)\1""")
    _STATIC_LINK_PATTERN = re.compile(r"""(?:href|src)=(["'])(/[^"'#?]+)[^"']*\1""")

    def __init__(self, *, content_prefix: str = "/content", home_route: str = "home") -> None:
        self.content_prefix = content_prefix
        self.home_route = home_route

    def validate(
        self,
        output_root: Path,
        manifest: RouteManifest,
        *,
        fragments: Optional[Dict[str, Path]] = None,
    ) -> List[str]:
        """Return a list of issues discovered in the built site."""

        output_root = Path(output_root)
        fetch = output_fetcher(output_root)
        router = ContentRouter(
            fetch,
            content_prefix=self.content_prefix,
            home_route=self.home_route,
        )
        issues: List[str] = []

        route_ids = {descriptor.id for descriptor in manifest.routes()}
        for descriptor in manifest.routes():
            state = router.navigate(descriptor.id)
            if descriptor.id == self.home_route:
                # The landing view never loads the home fragment; check it directly.
                if not _fragment_exists(output_root, descriptor.id):
                    issues.append(f"Route '{descriptor.id}' has no content fragment")
                continue
            if state.not_found:
                issues.append(f"Route '{descriptor.id}' has no content fragment")

        fragment_files = fragments or {
            descriptor.id: output_root / CONTENT_DIRNAME / f"{descriptor.id}.html"
            for descriptor in manifest.routes()
        }
        for route_id, path in fragment_files.items():
            try:
                text = Path(path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            issues.extend(self._check_fragment(output_root, route_id, text, route_ids))
        return issues

    def _check_fragment(
        self, output_root: Path, route_id: str, text: str, route_ids: Iterable[str]
    ) -> List[str]:
        issues: List[str] = []
        for match in self._ROUTE_LINK_PATTERN.finditer(text):
            target = route_from_hash(match.group(2))
            if not target or target == self.home_route:
                continue
            if target not in route_ids:
                issues.append(f"Broken link in '{route_id}': #/{target}")
        prefix = self.content_prefix.rstrip("/") + "/"
        for match in self._STATIC_LINK_PATTERN.finditer(text):
            target = match.group(2)
            if not target.startswith(prefix):
                continue
            if site_file(output_root, target) is None:
                issues.append(f"Link target not found in '{route_id}': {target}")
        return issues


def _fragment_exists(output_root: Path, route_id: str) -> bool:
    return (output_root / CONTENT_DIRNAME / f"{route_id}.html").is_file()


__all__ = ["LinkValidator", "output_fetcher", "site_file"]
