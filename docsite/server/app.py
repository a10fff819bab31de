"""FastAPI application serving the built site from ordered static roots."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Optional, Sequence, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse, Response

from ..config import DocsiteConfig
from ..errors import NotFoundError
from ..logging import get_logger, uvicorn_log_level
from .media import (
    DEFAULT_MEDIA_TYPES,
    HTML_MEDIA_TYPE,
    SCRIPT_MEDIA_TYPE,
    is_bootstrap_module,
    media_type_for,
)

logger = get_logger("server")


@dataclass(frozen=True)
class ServerConfig:
    """Immutable request-resolution settings handed to :func:`create_app`."""

    static_roots: Tuple[Path, ...]
    media_types: Mapping[str, str] = field(default_factory=lambda: DEFAULT_MEDIA_TYPES)
    bootstrap_module: str = "main.ts"
    index_document: str = "index.html"

    @classmethod
    def from_paths(cls, roots: Sequence[Path], **kwargs: Any) -> "ServerConfig":
        return cls(static_roots=tuple(Path(root).resolve() for root in roots), **kwargs)

    @classmethod
    def from_config(cls, config: DocsiteConfig) -> "ServerConfig":
        return cls.from_paths(
            config.server.static_roots,
            bootstrap_module=config.server.bootstrap_module,
        )


def resolve_static_path(roots: Sequence[Path], request_path: str) -> Optional[Path]:
    """Return the first existing file for ``request_path`` across ``roots``."""
    relative = request_path.lstrip("/")
    if not relative:
        return None
    for root in roots:
        base = Path(root).resolve()
        candidate = (base / relative).resolve()
        if not candidate.is_relative_to(base):
            continue
        if candidate.is_file():
            return candidate
    return None


def create_app(server_config: ServerConfig) -> FastAPI:
    """Create the FastAPI application for dev and production serving."""

    # API docs routes would shadow client routes such as /docs.
    app = FastAPI(title="docsite", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.server_config = server_config

    @app.api_route("/{request_path:path}", methods=["GET", "HEAD"])
    def serve_path(request_path: str) -> Response:
        path = f"/{request_path}"
        if path == "/":
            path = f"/{server_config.index_document}"

        file_path = resolve_static_path(server_config.static_roots, path)
        if file_path is not None:
            return _file_response(file_path, path, server_config)

        if not PurePosixPath(path).suffix:
            shell = resolve_static_path(
                server_config.static_roots, f"/{server_config.index_document}"
            )
            if shell is not None:
                logger.debug("Routing %s to %s", path, shell)
                return FileResponse(shell, media_type=HTML_MEDIA_TYPE)

        raise NotFoundError(path)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_: Request, exc: NotFoundError) -> PlainTextResponse:
        logger.info("404 Not Found: %s", exc.request_path)
        return PlainTextResponse("File not found", status_code=404)

    return app


def _file_response(file_path: Path, request_path: str, server_config: ServerConfig) -> Response:
    if is_bootstrap_module(request_path, server_config.bootstrap_module):
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error reading bootstrap module %s: %s", file_path, exc)
            return PlainTextResponse("Error reading file", status_code=500)
        logger.debug("Serving bootstrap module %s as %s", file_path, SCRIPT_MEDIA_TYPE)
        return Response(content=text, media_type=SCRIPT_MEDIA_TYPE)

    media_type = media_type_for(request_path, server_config.media_types)
    logger.debug("Serving %s with media type %s", file_path, media_type)
    return FileResponse(file_path, media_type=media_type)


def run_server(
    server_config: ServerConfig, host: str = "127.0.0.1", port: int = 3000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(server_config)
    logger.info("Server running at http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level())


__all__ = ["ServerConfig", "create_app", "resolve_static_path", "run_server"]
