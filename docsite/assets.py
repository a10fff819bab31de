"""Idempotent materialization of the static site scaffolding."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from .errors import AssetMissingError, WriteError
from .failsafe import build_shell_stub
from .logging import get_logger
from .rendering import (
    BOOTSTRAP_TEMPLATE,
    ROUTER_TEMPLATE,
    STYLESHEET_TEMPLATE,
    TemplateRenderer,
)
from .utils import atomic_write_text, ensure_directory

SHELL_DOCUMENT = "index.html"

# User-owned files: copied from the root only when the destination is absent.
ROOT_FILES_TO_COPY: Tuple[str, ...] = (
    SHELL_DOCUMENT,
    ".nojekyll",
    "CNAME",
    "favicon.svg",
)

REQUIRED_DIRECTORIES: Tuple[str, ...] = ("assets/css", "src", "content")

# Build-owned files: rendered from templates only when absent.
GENERATED_ARTIFACTS: Tuple[Tuple[str, str], ...] = (
    ("assets/css/prettydocs.css", STYLESHEET_TEMPLATE),
    ("src/main.js", BOOTSTRAP_TEMPLATE),
    ("src/bundle.js", ROUTER_TEMPLATE),
)

ROUTER_SCRIPT_URL = "/src/bundle.js"


@dataclass
class MaterializeResult:
    """What the materializer touched during one run."""

    copied: List[str] = field(default_factory=list)
    created_dirs: List[str] = field(default_factory=list)
    generated: List[str] = field(default_factory=list)
    preserved: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    synthesized_shell: bool = False


class AssetMaterializer:
    """Copies user-owned files and renders build-owned artifacts without clobbering."""

    def __init__(
        self,
        context: Dict[str, Any],
        *,
        renderer: TemplateRenderer | None = None,
        root_files: Sequence[str] = ROOT_FILES_TO_COPY,
    ) -> None:
        self.context = context
        self.renderer = renderer or TemplateRenderer()
        self.root_files = tuple(root_files)
        self.logger = get_logger("assets")

    def materialize(self, root_dir: Path, output_root: Path) -> MaterializeResult:
        result = MaterializeResult()
        root_dir = Path(root_dir)
        output_root = Path(output_root)

        if ensure_directory(output_root):
            result.created_dirs.append(".")
        self._copy_root_files(root_dir, output_root, result)
        self._ensure_shell(root_dir, output_root, result)
        for relative in REQUIRED_DIRECTORIES:
            if ensure_directory(output_root / relative):
                result.created_dirs.append(relative)
                self.logger.debug("Created directory %s", output_root / relative)
        self._generate_artifacts(output_root, result)
        self._check_shell_references(output_root, result)
        return result

    def _copy_root_files(self, root_dir: Path, output_root: Path, result: MaterializeResult) -> None:
        for name in self.root_files:
            source = root_dir / name
            dest = output_root / name
            if dest.exists():
                result.preserved.append(name)
                self.logger.debug("Keeping existing %s", dest)
                continue
            if not source.is_file():
                self.logger.debug("No %s in %s; nothing to copy", name, root_dir)
                continue
            try:
                shutil.copyfile(source, dest)
            except OSError as exc:
                raise WriteError(dest, "copy", str(exc)) from exc
            result.copied.append(name)
            self.logger.info("Copied %s to %s", source, dest)

    def _ensure_shell(self, root_dir: Path, output_root: Path, result: MaterializeResult) -> None:
        shell = output_root / SHELL_DOCUMENT
        if shell.exists():
            return
        error = AssetMissingError(SHELL_DOCUMENT, [output_root, root_dir])
        message = f"{error}; writing a minimal shell"
        self.logger.warning(message)
        result.warnings.append(message)
        atomic_write_text(
            shell,
            build_shell_stub(self.context, reason=f"{SHELL_DOCUMENT} missing", renderer=self.renderer),
        )
        result.synthesized_shell = True

    def _generate_artifacts(self, output_root: Path, result: MaterializeResult) -> None:
        for relative, template in GENERATED_ARTIFACTS:
            dest = output_root / relative
            if dest.exists():
                result.preserved.append(relative)
                continue
            atomic_write_text(dest, self.renderer.render(template, self.context))
            result.generated.append(relative)
            self.logger.info("Created %s", dest)

    def _check_shell_references(self, output_root: Path, result: MaterializeResult) -> None:
        shell = output_root / SHELL_DOCUMENT
        try:
            text = shell.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Cannot inspect {shell}: {exc}"
            self.logger.warning(message)
            result.warnings.append(message)
            return
        if ROUTER_SCRIPT_URL not in text:
            message = (
                f"{shell} does not load {ROUTER_SCRIPT_URL}; client navigation will not run"
            )
            self.logger.warning(message)
            result.warnings.append(message)


__all__ = [
    "AssetMaterializer",
    "GENERATED_ARTIFACTS",
    "MaterializeResult",
    "REQUIRED_DIRECTORIES",
    "ROOT_FILES_TO_COPY",
    "SHELL_DOCUMENT",
]
