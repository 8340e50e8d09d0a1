"""CLI entrypoints for mdmeta commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .compiler import Compiler
from .config import ConfigError, load_config
from .errors import CompileError
from .logging import configure_logging


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


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write DEBUG logs for the run to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .mdmeta.yml file (defaults to the one in the input directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdmeta",
        description="Compile annotated Markdown documentation into metadata modules.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile every Markdown document under INPUT into modules under OUTPUT.",
    )
    _add_verbose_option(compile_parser, suppress_default=True)
    _add_log_file_option(compile_parser, suppress_default=True)
    _add_config_option(compile_parser)
    compile_parser.add_argument("input", help="Directory containing annotated Markdown.")
    compile_parser.add_argument("output", help="Directory receiving the generated modules.")
    compile_parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of worker processes (defaults to the configured value).",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Parse and analyze documents under INPUT without writing output.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_log_file_option(check_parser, suppress_default=True)
    _add_config_option(check_parser)
    check_parser.add_argument("input", help="Directory containing annotated Markdown.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for mdmeta commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    input_dir = Path(args.input)
    if not input_dir.is_dir():
        parser.exit(1, f"Input directory not found: {input_dir}\n")

    try:
        config = load_config(Path(args.config) if args.config else input_dir)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    compiler = Compiler(config)

    if args.command == "compile":
        if args.jobs is not None and args.jobs < 1:
            parser.exit(1, "--jobs must be a positive integer\n")
        try:
            results = compiler.compile_tree(input_dir, Path(args.output), jobs=args.jobs)
        except CompileError as exc:
            parser.exit(1, f"mdmeta compile failed: {exc}\n")
        except (OSError, UnicodeDecodeError) as exc:
            parser.exit(1, f"mdmeta compile failed: {exc}\nRun with --verbose for more details.\n")
        units = sum(result.units for result in results)
        print(f"Compiled {len(results)} documents ({units} metadata units)")
    elif args.command == "check":
        try:
            results = compiler.check_tree(input_dir)
        except CompileError as exc:
            parser.exit(1, f"mdmeta check failed: {exc}\n")
        except (OSError, UnicodeDecodeError) as exc:
            parser.exit(1, f"mdmeta check failed: {exc}\nRun with --verbose for more details.\n")
        units = sum(result.units for result in results)
        print(f"{len(results)} documents OK ({units} metadata units)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
