"""Python model of the browser content router."""

from .router import (
    ContentRouter,
    RouterState,
    SidebarItem,
    fragment_paths,
    route_from_hash,
    sidebar_items,
    view_for_route,
)

__all__ = [
    "ContentRouter",
    "RouterState",
    "SidebarItem",
    "fragment_paths",
    "route_from_hash",
    "sidebar_items",
    "view_for_route",
]
