"""Static/dev server for built documentation sites."""

from .app import ServerConfig, create_app, resolve_static_path, run_server

__all__ = ["ServerConfig", "create_app", "resolve_static_path", "run_server"]
