"""Command line interface for the Zenoscript transpiler."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..core.config import TranspileOptions, settings
from ..core.errors import ZenoscriptError
from ..core.logging import setup_logging
from .pipeline import ZenoscriptTranspiler


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zeno",
        description="Transpile Zenoscript (.zs) source into TypeScript.",
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        help="Path to the .zs file to transpile.",
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        help="Optional destination file or directory for the generated TypeScript "
        "(defaults to stdout).",
    )
    parser.add_argument(
        "-e",
        "--eval",
        metavar="CODE",
        help="Transpile CODE instead of a file and print the result.",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        action="store_true",
        help="Log progress information.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log the source and the output of every stage.",
    )
    parser.add_argument(
        "--encoding",
        default=settings.ENCODING,
        help=f"Encoding to use when reading and writing files (default: {settings.ENCODING}).",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=None,
        help="Log record format (default: from settings).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress informational output.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{settings.APP_NAME} v{__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        setup_logging("DEBUG", args.log_format)
    elif args.verbose:
        setup_logging("INFO", args.log_format)
    else:
        setup_logging(fmt=args.log_format)

    transpiler = ZenoscriptTranspiler(TranspileOptions(verbose=args.verbose, debug=args.debug))

    if args.eval is None and args.source is None:
        parser.print_usage(sys.stderr)
        print("Error: no input file or -e CODE given", file=sys.stderr)
        return 1

    output = args.output
    if output is not None and output.is_dir() and args.source is not None:
        output = output / (args.source.stem + settings.OUTPUT_SUFFIX)

    try:
        if args.eval is not None:
            result = transpiler.transpile(args.eval)
        else:
            result = transpiler.transpile_file(
                args.source,
                output_path=output,
                encoding=args.encoding,
            )
    except (FileNotFoundError, ZenoscriptError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.eval is not None or output is None:
        print(result)
    elif not args.quiet:
        print(f"Wrote {output}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
