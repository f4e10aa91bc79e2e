"""CLI entrypoints for recipegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .commands import discover_and_run
from .config import FETCHER_CHOICES, ConfigError, RecipeGenConfig, load_config
from .discovery import RecipeDiscovery
from .logging import configure_logging
from .recipe_format import dumps_recipe


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_project_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path inside the project (defaults to current directory).",
    )
    parser.add_argument(
        "--recipes-dir",
        type=Path,
        help="Directory that receives published recipes.",
    )
    parser.add_argument(
        "--fetcher",
        choices=FETCHER_CHOICES,
        help="Preferred fetcher when the project has no origin remote.",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Accept proposed recipes without prompting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipegen",
        description="Discover packages in a repository and create recipes for them.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover",
        help="Create recipes for packages that do not have one yet.",
    )
    _add_project_options(discover_parser)

    status_parser = subparsers.add_parser(
        "status",
        help="List stored recipes and packages still missing one.",
    )
    _add_project_options(status_parser)

    run_parser = subparsers.add_parser(
        "run",
        help="Discover packages, then run a shell command from the project root.",
    )
    _add_project_options(run_parser)
    run_parser.add_argument(
        "--sink",
        default="recipegen",
        help="Name of the log sink that receives the command output.",
    )
    run_parser.add_argument(
        "-c",
        "--command",
        dest="shell_command",
        required=True,
        help="Shell command to run once discovery finishes.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for recipegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = _config_from_args(args)
    except ConfigError as exc:
        parser.exit(1, f"recipegen: {exc}\n")

    discovery = RecipeDiscovery(config)

    if args.command == "discover":
        try:
            report = discovery.discover(args.path)
        except ConfigError as exc:
            parser.exit(1, f"recipegen: {exc}\n")
        for name in report.created:
            print(f"Created recipe {name}")
        if not report.created:
            print("No new recipes")
        if report.skipped:
            parser.exit(1, f"{len(report.skipped)} package(s) skipped; run with --verbose for details.\n")
    elif args.command == "status":
        try:
            status = discovery.status(args.path)
        except ConfigError as exc:
            parser.exit(1, f"recipegen: {exc}\n")
        for record in status.records:
            print(dumps_recipe(record), end="")
        for name, reason in status.skipped_entries:
            print(f"unreadable recipe {name}: {reason}")
        for main_file in status.uncovered_main_files:
            print(f"missing recipe: {_relativize(main_file, status.root)}")
    elif args.command == "run":
        if not args.shell_command.strip():
            parser.exit(2, "recipegen run: empty command\n")
        try:
            code = discover_and_run(
                discovery, args.shell_command, path=args.path, sink=args.sink
            )
        except ConfigError as exc:
            parser.exit(1, f"recipegen: {exc}\n")
        if code:
            parser.exit(code)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _config_from_args(args: argparse.Namespace) -> RecipeGenConfig:
    config = load_config(args.path)
    return config.with_overrides(
        recipes_dir=args.recipes_dir,
        fetcher=args.fetcher,
        interactive=False if args.non_interactive else None,
    )


def _relativize(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
