"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import WriteError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only report warnings and errors.",
    )


def _add_config_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress_default else ".",
        help="Path to .docsite.yml or the directory holding it (defaults to current directory).",
    )


def _add_path_overrides(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--content-dir",
        default=None,
        help="Markdown content root (overrides content_dir).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output root for the built site (overrides output_dir).",
    )


def _add_server_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=None, help="Interface to bind (overrides server.host).")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (overrides PORT and server.port).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Build and serve single-page documentation sites from Markdown.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    _add_config_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Render the content tree and materialize the site.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_quiet_option(build_parser, suppress_default=True)
    _add_config_option(build_parser, suppress_default=True)
    _add_path_overrides(build_parser)

    dev_parser = subparsers.add_parser(
        "dev",
        help="Build, serve and rebuild when content changes.",
    )
    _add_verbose_option(dev_parser, suppress_default=True)
    _add_quiet_option(dev_parser, suppress_default=True)
    _add_config_option(dev_parser, suppress_default=True)
    _add_path_overrides(dev_parser)
    _add_server_options(dev_parser)

    start_parser = subparsers.add_parser(
        "start",
        help="Serve an already-built site.",
    )
    _add_verbose_option(start_parser, suppress_default=True)
    _add_quiet_option(start_parser, suppress_default=True)
    _add_config_option(start_parser, suppress_default=True)
    _add_server_options(start_parser)

    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove generated build output.",
    )
    _add_verbose_option(clean_parser, suppress_default=True)
    _add_quiet_option(clean_parser, suppress_default=True)
    _add_config_option(clean_parser, suppress_default=True)
    clean_parser.add_argument(
        "--all",
        dest="remove_all",
        action="store_true",
        help="Remove the whole output root, including copied user files.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"docsite: {exc}\n")
    config.with_overrides(
        content_dir=getattr(args, "content_dir", None),
        output_dir=getattr(args, "output_dir", None),
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )

    orchestrator = Orchestrator(config)

    if args.command == "build":
        try:
            outcome = orchestrator.run_build()
        except (FileNotFoundError, NotADirectoryError, PermissionError) as exc:
            parser.exit(1, f"{exc}\n")
        except WriteError as exc:
            parser.exit(1, f"docsite build failed: {exc}\nRun with --verbose for more details.\n")
        rel_path = _relativize(outcome.output_root)
        print(f"Built {outcome.fragment_count} pages into {rel_path}")
        if outcome.warnings:
            print(f"{len(outcome.warnings)} warning(s); run with --verbose for details")
    elif args.command == "dev":
        try:
            orchestrator.run_dev()
        except (FileNotFoundError, NotADirectoryError, PermissionError) as exc:
            parser.exit(1, f"{exc}\n")
        except WriteError as exc:
            parser.exit(1, f"docsite dev failed: {exc}\nRun with --verbose for more details.\n")
    elif args.command == "start":
        orchestrator.run_start()
    elif args.command == "clean":
        try:
            removed = orchestrator.run_clean(remove_all=bool(args.remove_all))
        except WriteError as exc:
            parser.exit(1, f"docsite clean failed: {exc}\n")
        if removed:
            for path in removed:
                print(f"Removed {_relativize(path)}")
        else:
            print("Nothing to clean")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
