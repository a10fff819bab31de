"""Navigation rules of the browser content router, modelled in Python.

The generated ``src/bundle.js`` applies these rules in the browser. The model
here drives the built-site link check and lets the navigation behaviour be
exercised without a browser: the caller injects a ``fetch`` callable that
returns fragment text or raises :class:`~docsite.errors.FetchError`.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional
from urllib.parse import unquote

from ..errors import FetchError
from ..logging import get_logger
from ..models import RouteManifest

LANDING_VIEW = "landing"
DOCS_VIEW = "docs"

NOT_FOUND_HTML = (
    '<div class="error-container">'
    "<h2>Content Not Found</h2>"
    "<p>Sorry, the requested content could not be loaded.</p>"
    '<p><a href="#" class="btn btn-primary">Go to Home</a></p>'
    "</div>"
)

Fetcher = Callable[[str], str]

_HASH_PREFIX = re.compile(r"^#/?")
_FIRST_H1 = re.compile(r"<h1\b[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")

logger = get_logger("router")


def route_from_hash(hash_value: str) -> str:
    """Strip a leading ``#/`` or ``#`` and percent-decode the rest."""
    return unquote(_HASH_PREFIX.sub("", hash_value or "", count=1))


def is_home(route: str, home_route: str = "home") -> bool:
    return not route or route == home_route


def view_for_route(route: str, home_route: str = "home") -> str:
    return LANDING_VIEW if is_home(route, home_route) else DOCS_VIEW


def href_for_route(route: str, home_route: str = "home") -> str:
    return "#" if is_home(route, home_route) else f"#/{route}"


def fragment_paths(route: str, content_prefix: str = "/content") -> List[str]:
    """Return the primary fragment URL and, when it differs, the alternate one.

    The alternate form replaces only the first ``-`` with ``/``.
    """
    prefix = content_prefix.rstrip("/")
    paths = [f"{prefix}/{route}.html"]
    alternate = route.replace("-", "/", 1)
    if alternate != route:
        paths.append(f"{prefix}/{alternate}.html")
    return paths


@dataclass(frozen=True)
class SidebarItem:
    """A rendered sidebar row: either a category divider or a route link."""

    kind: str
    title: str
    route_id: str = ""
    category: Optional[str] = None
    href: str = ""
    active: bool = False

    @property
    def is_divider(self) -> bool:
        return self.kind == "divider"


def sidebar_items(
    manifest: RouteManifest, current_route: str = "", home_route: str = "home"
) -> List[SidebarItem]:
    items: List[SidebarItem] = []
    current_category: Optional[str] = None
    target = home_route if is_home(current_route, home_route) else current_route
    for descriptor in manifest:
        if descriptor.is_header:
            if descriptor.category and descriptor.category != current_category:
                current_category = descriptor.category
                items.append(
                    SidebarItem(kind="divider", title=descriptor.title, category=descriptor.category)
                )
            continue
        items.append(
            SidebarItem(
                kind="link",
                title=descriptor.title,
                route_id=descriptor.id,
                category=descriptor.category,
                href=href_for_route(descriptor.id, home_route),
                active=descriptor.id == target,
            )
        )
    return items


def title_from_fragment(fragment: str, site_title: str) -> str:
    match = _FIRST_H1.search(fragment)
    if match is None:
        return site_title
    heading = html.unescape(_TAG.sub("", match.group(1))).strip()
    return f"{heading} - {site_title}" if heading else site_title


@dataclass
class RouterState:
    """What the page shows after a navigation settles."""

    view: str = LANDING_VIEW
    route: str = ""
    content_html: str = ""
    title: str = ""
    loaded_from: Optional[str] = None
    not_found: bool = False
    sidebar: List[SidebarItem] = field(default_factory=list)


@dataclass(frozen=True)
class Navigation:
    token: int
    route: str


class ContentRouter:
    """Hash-route state machine mirroring the generated client router."""

    def __init__(
        self,
        fetch: Fetcher,
        *,
        manifest_url: str = "/content/routes.json",
        content_prefix: str = "/content",
        home_route: str = "home",
        site_title: str = "Documentation",
    ) -> None:
        self.fetch = fetch
        self.manifest_url = manifest_url
        self.content_prefix = content_prefix
        self.home_route = home_route
        self.site_title = site_title
        self.manifest: Optional[RouteManifest] = None
        self.navigation_available = False
        self.state = RouterState(title=site_title)
        self._token = 0

    def load_manifest(self) -> Optional[RouteManifest]:
        try:
            manifest = RouteManifest.from_json(self.fetch(self.manifest_url))
        except (FetchError, ValueError) as exc:
            logger.warning("Error loading routes: %s", exc)
            self.manifest = None
            self.navigation_available = False
            return None
        self.manifest = manifest
        self.navigation_available = True
        self.state.sidebar = sidebar_items(manifest, self.state.route, self.home_route)
        return manifest

    def start(self, hash_value: str = "") -> RouterState:
        """Load the manifest, then show the route named by ``hash_value``."""
        self.load_manifest()
        return self.on_hash_change(hash_value)

    def on_hash_change(self, hash_value: str) -> RouterState:
        return self.navigate(route_from_hash(hash_value))

    def navigate(self, route: str) -> RouterState:
        return self.complete(self.begin(route))

    def begin(self, route: str) -> Navigation:
        """Start a navigation; any navigation begun earlier becomes stale."""
        self._token += 1
        self.state.route = route
        self.state.view = view_for_route(route, self.home_route)
        if self.manifest is not None:
            self.state.sidebar = sidebar_items(self.manifest, route, self.home_route)
        return Navigation(token=self._token, route=route)

    def complete(self, navigation: Navigation) -> RouterState:
        """Fetch and apply the content for ``navigation`` unless it is stale."""
        if is_home(navigation.route, self.home_route):
            if navigation.token == self._token:
                self._show_landing()
            return self.state

        content: Optional[str] = None
        loaded_from: Optional[str] = None
        for url in fragment_paths(navigation.route, self.content_prefix):
            try:
                content = self.fetch(url)
            except FetchError as exc:
                logger.debug("Fragment fetch failed: %s", exc)
                continue
            loaded_from = url
            break

        if navigation.token != self._token:
            logger.debug("Dropping stale navigation to %s", navigation.route)
            return self.state

        if content is None:
            logger.warning("Content not found for route %s", navigation.route)
            self.state.content_html = NOT_FOUND_HTML
            self.state.title = self.site_title
            self.state.loaded_from = None
            self.state.not_found = True
        else:
            self.state.content_html = content
            self.state.title = title_from_fragment(content, self.site_title)
            self.state.loaded_from = loaded_from
            self.state.not_found = False
        return self.state

    def _show_landing(self) -> None:
        self.state.content_html = ""
        self.state.title = self.site_title
        self.state.loaded_from = None
        self.state.not_found = False


__all__ = [
    "ContentRouter",
    "DOCS_VIEW",
    "Fetcher",
    "LANDING_VIEW",
    "NOT_FOUND_HTML",
    "Navigation",
    "RouterState",
    "SidebarItem",
    "fragment_paths",
    "href_for_route",
    "is_home",
    "route_from_hash",
    "sidebar_items",
    "title_from_fragment",
    "view_for_route",
]
