"""Pipeline orchestration for build/clean/dev/start flows."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .assets import GENERATED_ARTIFACTS, AssetMaterializer, MaterializeResult
from .config import DocsiteConfig
from .errors import WriteError
from .logging import get_logger
from .manifest import CONTENT_DIRNAME, MEDIA_SUFFIXES, RouteManifestBuilder
from .parsing import DocumentParser
from .postproc.links import LinkValidator
from .rendering import TemplateRenderer, site_context
from .scanner import ContentScanner


@dataclass
class BuildOutcome:
    """Result of a site build."""

    output_root: Path
    manifest_path: Path
    fragment_count: int
    warnings: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    assets: Optional[MaterializeResult] = None


class Orchestrator:
    """Coordinates the build pipeline and the serving modes."""

    def __init__(
        self,
        config: DocsiteConfig,
        *,
        builder: RouteManifestBuilder | None = None,
        materializer: AssetMaterializer | None = None,
        link_validator: LinkValidator | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.logger = get_logger("orchestrator")
        self.builder = builder or self._default_builder(config)
        self.materializer = materializer or AssetMaterializer(
            site_context(config), renderer=renderer
        )
        self.link_validator = link_validator or LinkValidator(
            content_prefix=config.content_url_prefix,
            home_route=config.home_route,
        )

    def run_build(self) -> BuildOutcome:
        """Materialize the site scaffolding and render the content tree."""
        content_dir = self.config.content_dir
        output_root = self.config.output_dir
        self.logger.info("Building %s into %s", content_dir, output_root)
        if not content_dir.exists():
            raise FileNotFoundError(f"Content root not found: {content_dir}")
        if not content_dir.is_dir():
            raise NotADirectoryError(f"Content root is not a directory: {content_dir}")

        assets = self.materializer.materialize(self.config.root_dir, output_root)
        result = self.builder.build(content_dir, output_root)

        warnings = list(assets.warnings) + list(result.warnings)
        link_issues = self.link_validator.validate(
            output_root, result.manifest, fragments=result.fragments
        )
        for issue in link_issues:
            self.logger.warning(issue)
        warnings.extend(link_issues)

        self.logger.info(
            "Build complete: %d fragments, %d skipped, %d warnings",
            len(result.fragments),
            len(result.skipped),
            len(warnings),
        )
        return BuildOutcome(
            output_root=output_root,
            manifest_path=result.manifest_path,
            fragment_count=len(result.fragments),
            warnings=warnings,
            skipped=list(result.skipped),
            assets=assets,
        )

    def run_clean(self, *, remove_all: bool = False) -> List[Path]:
        """Remove build output and return the paths that were deleted.

        Without ``remove_all`` only build-owned files go: the content directory
        and the generated stylesheet and scripts. User-owned copies stay.
        """
        output_root = self.config.output_dir
        if remove_all:
            self._guard_output_root(output_root)
            targets = [output_root]
        else:
            targets = [output_root / CONTENT_DIRNAME]
            targets.extend(output_root / relative for relative, _ in GENERATED_ARTIFACTS)

        removed: List[Path] = []
        for target in targets:
            if not target.exists():
                continue
            try:
                if target.is_dir():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            except OSError as exc:
                raise WriteError(target, "remove", str(exc)) from exc
            removed.append(target)
            self.logger.info("Removed %s", target)
        if not removed:
            self.logger.info("Nothing to clean in %s", output_root)
        return removed

    def run_start(self) -> None:  # pragma: no cover - blocks on the server loop
        """Serve the already-built site."""
        from .server import ServerConfig, run_server

        run_server(
            ServerConfig.from_config(self.config),
            host=self.config.server.host,
            port=self.config.server.port,
        )

    def run_dev(self) -> None:  # pragma: no cover - blocks on the server loop
        """Build once, then serve while rebuilding on content changes."""
        from .server import ServerConfig, run_server
        from .server.watcher import DevWatcher, RebuildHandler

        self.run_build()
        handler = RebuildHandler(
            self.run_build,
            filenames=self.materializer.root_files,
            ignore_dirs=[self.config.output_dir],
        )
        watcher = DevWatcher(handler, self.config.content_dir, self.config.root_dir)
        with watcher:
            run_server(
                ServerConfig.from_config(self.config),
                host=self.config.server.host,
                port=self.config.server.port,
            )

    def _default_builder(self, config: DocsiteConfig) -> RouteManifestBuilder:
        exclude_paths = list(config.exclude_paths)
        output_rel = _relative_inside(config.output_dir, config.content_dir)
        if output_rel:
            # An output tree nested in the content root must not feed the next build.
            exclude_paths.append(f"/{output_rel}/")
        parser = DocumentParser(
            diagram_languages=tuple(config.diagram_languages),
            content_prefix=config.content_url_prefix,
            home_route=config.home_route,
        )
        return RouteManifestBuilder(
            parser,
            ContentScanner(exclude_paths),
            media_scanner=ContentScanner(exclude_paths, suffixes=MEDIA_SUFFIXES),
            home_route=config.home_route,
            categories=config.categories,
        )

    def _guard_output_root(self, output_root: Path) -> None:
        resolved = output_root.resolve()
        for protected in (self.config.root, self.config.root_dir, self.config.content_dir):
            protected = protected.resolve()
            if resolved == protected or protected.is_relative_to(resolved):
                raise WriteError(
                    output_root, "clean", f"refusing to remove a directory that contains {protected}"
                )


def _relative_inside(path: Path, root: Path) -> Optional[str]:
    try:
        relative = path.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    text = relative.as_posix()
    return None if text in ("", ".") else text


__all__ = ["BuildOutcome", "Orchestrator"]
