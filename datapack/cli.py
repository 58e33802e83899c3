"""CLI entrypoints for datapack commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import BuildError, DataPackError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .sink import CompressionMode


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datapack",
        description="Assemble data pack archives from a .datapack.yml manifest.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Build the data pack archive described by a manifest.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Manifest file or directory containing .datapack.yml (defaults to current directory).",
    )
    build_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Archive path; overrides build.output from the manifest.",
    )
    build_parser.add_argument(
        "--compression",
        choices=[mode.value for mode in CompressionMode],
        default=None,
        help="Compression applied to every entry; overrides the manifest.",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the archive entries without writing anything.",
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Create a starter .datapack.yml and load function.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    init_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to initialise (defaults to current directory).",
    )
    init_parser.add_argument(
        "--namespace",
        default=None,
        help="Namespace name (defaults to the directory name).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for datapack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    orchestrator = Orchestrator()

    if args.command == "build":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = orchestrator.run_build(
                args.path,
                output=args.output,
                dry_run=dry_run,
                compression=args.compression,
            )
        except BuildError as exc:
            logger.debug("Build aborted at %s", exc.entry_path, exc_info=exc.cause)
            parser.exit(1, f"datapack build failed at {exc.entry_path}: {exc.cause}\n")
        except DataPackError as exc:
            logger.debug("Build failed", exc_info=exc)
            parser.exit(1, f"datapack build failed: {exc}\nRun with --verbose for more details.\n")
        if dry_run:
            print(f"Entries for {_relativize(outcome.path)} (dry-run):")
            for entry in outcome.entries:
                print(f"  {entry}")
        else:
            print(f"Data pack written to {_relativize(outcome.path)} ({len(outcome.entries)} entries)")
    elif args.command == "init":
        try:
            manifest = orchestrator.run_init(args.path, namespace=args.namespace)
        except FileExistsError as exc:
            parser.exit(1, f"{exc}\n")
        print(f"Manifest created at {_relativize(manifest)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
