"""
Notebook converter CLI

Convert notebook files to PDF (or per-page SVG).

Usage:
    python -m rmnotebook <input.rm> [-o output.pdf]
    python -m rmnotebook samples/*.rm -o output/ --format svg
"""

import argparse
import logging
import sys
from pathlib import Path

from .assembler import assemble_document
from .config import OUTPUT_FORMATS, load_config
from .convert import DocumentKind, convert_document
from .errors import ConversionError
from .export import export_all
from .parser import analyze_file, decode_notebook
from .renderer import render_to_files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert tablet notebook files to PDF or SVG",
        prog="rmnotebook"
    )
    parser.add_argument(
        "input",
        nargs="+",
        type=Path,
        help="Input notebook file(s)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file or directory (default: next to the input)"
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: pdf, or the config file's value)"
    )
    parser.add_argument(
        "--kind",
        default=DocumentKind.NOTEBOOK.value,
        help="Document kind: notebook, pdf-passthrough (default: notebook)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Page render threads per notebook"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path("convert.toml"),
        help="Path to convert.toml config"
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Force export all (ignore timestamps)"
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Analyze file(s) without converting"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def expand_inputs(patterns: list[Path]) -> list[Path]:
    """Expand glob patterns that the shell did not."""
    input_files = []
    for pattern in patterns:
        if pattern.exists():
            input_files.append(pattern)
        else:
            matches = sorted(Path(".").glob(str(pattern)))
            if matches:
                input_files.extend(matches)
            else:
                print(f"Warning: No files matching '{pattern}'", file=sys.stderr)
    return input_files


def convert_one(input_file: Path, output: Path | None, kind: str, config) -> str:
    """Convert a single file. Returns a short status message."""
    data = input_file.read_bytes()

    if config.format == "svg":
        output_dir = output or input_file.with_suffix("")
        document = assemble_document(decode_notebook(data), workers=config.workers)
        render_to_files(document, output_dir)
        return f"OK ({len(document)} pages)"

    output_file = output or input_file.with_suffix(".pdf")
    pdf_bytes = convert_document(data, kind, workers=config.workers, scale=config.scale)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(pdf_bytes)
    return f"OK ({len(pdf_bytes)} bytes)"


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config).override(format=args.format, workers=args.workers)
    except ValueError as e:
        print(f"Error: invalid config: {e}", file=sys.stderr)
        sys.exit(2)

    input_files = expand_inputs(args.input)
    if not input_files:
        print("Error: No input files found", file=sys.stderr)
        sys.exit(1)

    # Analyze mode
    if args.analyze:
        for input_file in input_files:
            analyze_file(input_file)
            print()
        return

    # SVG pages are rendered from notebook strokes only
    if config.format == "svg" and DocumentKind.from_tag(args.kind) is not DocumentKind.NOTEBOOK:
        print("Error: svg output only supports notebooks", file=sys.stderr)
        sys.exit(1)

    # Multiple inputs - batch export into a directory
    if len(input_files) > 1:
        if DocumentKind.from_tag(args.kind) is not DocumentKind.NOTEBOOK:
            print("Error: batch export only supports notebooks", file=sys.stderr)
            sys.exit(1)
        output_dir = args.output or config.output_dir
        stats = export_all(
            input_files,
            output_dir,
            config,
            verbose=not args.quiet,
            force=args.force,
        )
        if not args.quiet:
            print()
            print(f"Exported {stats['exported']}, skipped {stats['skipped']}, "
                  f"failed {stats['failed']}")
            print(f"  Output: {output_dir}")
        if stats["failed"]:
            sys.exit(1)
        return

    input_file = input_files[0]
    if not args.quiet:
        print(f"Converting {input_file.name}...", end=" ", flush=True)
    try:
        message = convert_one(input_file, args.output, args.kind, config)
    except (ConversionError, OSError) as e:
        print(f"FAILED: {e}", file=sys.stderr)
        sys.exit(1)
    if not args.quiet:
        print(message)


if __name__ == "__main__":
    main()
