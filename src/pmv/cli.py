"""Command line interface for pmv."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import ScaffoldConfig
from .errors import InstantiationError, ProjectNameError
from .naming import suggest_name, validate
from .scaffold import ProjectScaffolder

EXIT_OK = 0
EXIT_INSTANTIATION_ERROR = 1
EXIT_NAME_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pmv", description="Create a new Rust scripting project")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every file as it is written")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="create a new project from the built-in template")
    new_parser.add_argument("name", help="Name of the new project (lowercase letters, digits, '-' and '_')")
    new_parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        help="Directory to create; defaults to ./NAME",
    )
    new_parser.add_argument(
        "--template",
        type=Path,
        help="Use the template stored in this directory instead of the built-in one",
    )

    check_parser = subparsers.add_parser("check", help="validate a project name without creating anything")
    check_parser.add_argument("name", help="Project name to validate")

    return parser


def _report_name_error(exc: ProjectNameError) -> int:
    print(f"error: {exc.kind.value}: {exc.message}", file=sys.stderr)
    suggestion = suggest_name(exc.name)
    if suggestion is not None:
        print(f"hint: try '{suggestion}'", file=sys.stderr)
    return EXIT_NAME_ERROR


def _report_instantiation_error(exc: InstantiationError) -> int:
    print(f"error: {exc.kind.value}: {exc}", file=sys.stderr)
    if exc.leftover is not None:
        print(
            f"warning: {exc.leftover} may contain a partial, unusable project tree; remove it manually",
            file=sys.stderr,
        )
    return EXIT_INSTANTIATION_ERROR


def _handle_new(args: argparse.Namespace) -> int:
    config = ScaffoldConfig.from_name(args.name, destination=args.directory, template_dir=args.template)
    result = ProjectScaffolder().create(config)
    print(f"Project created at {result.destination}")
    return EXIT_OK


def _handle_check(args: argparse.Namespace) -> int:
    print(validate(args.name))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {"new": _handle_new, "check": _handle_check}
    try:
        return handlers[args.command](args)
    except ProjectNameError as exc:
        return _report_name_error(exc)
    except InstantiationError as exc:
        return _report_instantiation_error(exc)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
