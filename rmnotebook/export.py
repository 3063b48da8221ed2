"""
Batch export of notebook files to PDF or SVG.

Each notebook is an independent conversion, so files are spread over a
process pool. Outputs newer than their input are skipped unless forced.
"""

from __future__ import annotations

import logging
from multiprocessing import Pool
from pathlib import Path
from typing import Iterable

from .assembler import assemble_document
from .config import ConvertConfig
from .errors import ConversionError
from .parser import parse_file
from .pdf_export import save_pdf
from .renderer import render_to_files

_logger = logging.getLogger(__name__)


def output_path_for(input_path: Path, output_dir: Path, fmt: str) -> Path:
    """PDF file, or directory of per-page SVGs, for a notebook."""
    if fmt == "svg":
        return output_dir / input_path.stem
    return output_dir / f"{input_path.stem}.pdf"


def export_notebook(input_path: Path, output_path: Path, config: ConvertConfig) -> int:
    """
    Convert a single notebook file.

    Returns:
        Number of pages written
    """
    notebook = parse_file(input_path)
    document = assemble_document(notebook, workers=config.workers)
    if config.format == "svg":
        render_to_files(document, output_path)
    else:
        save_pdf(document, output_path, scale=config.scale)
    return len(document)


def _is_up_to_date(input_path: Path, output_path: Path) -> bool:
    if not output_path.exists():
        return False
    return output_path.stat().st_mtime >= input_path.stat().st_mtime


def _export_worker(args: tuple) -> tuple[str, bool, str]:
    """Worker function for multiprocessing. PyMuPDF is not thread-safe, hence process pool."""
    input_path, output_path, config = args
    try:
        pages = export_notebook(Path(input_path), Path(output_path), config)
    except (ConversionError, OSError) as e:
        return (Path(input_path).name, False, str(e))
    return (Path(input_path).name, True, f"{pages} pages")


def export_all(
    input_paths: Iterable[Path],
    output_dir: Path,
    config: ConvertConfig,
    verbose: bool = True,
    force: bool = False,
) -> dict[str, int]:
    """
    Export many notebooks.

    Args:
        input_paths: Notebook files
        output_dir: Directory for outputs
        config: Conversion settings (format, workers, processes, scale)
        verbose: Print progress
        force: Export even when the output is newer than the input

    Returns:
        Dict with counts of exported, skipped and failed notebooks
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    work_items = []
    stats = {"exported": 0, "skipped": 0, "failed": 0}

    for input_path in input_paths:
        input_path = Path(input_path)
        output_path = output_path_for(input_path, output_dir, config.format)
        # Incremental: skip if not modified
        if not force and _is_up_to_date(input_path, output_path):
            stats["skipped"] += 1
            continue
        work_items.append((str(input_path), str(output_path), config))

    if verbose:
        changed = len(work_items)
        if changed > 0:
            print(f"  \033[91m{changed} changed\033[0m, {stats['skipped']} unchanged")
        else:
            print(f"  {stats['skipped']} unchanged")
        print()

    if not work_items:
        return stats

    def record(result: tuple[str, bool, str]) -> None:
        name, success, detail = result
        if success:
            stats["exported"] += 1
            if verbose:
                done = stats["exported"] + stats["failed"]
                print(f"  [{done}/{len(work_items)}] {name} ({detail})")
        else:
            stats["failed"] += 1
            _logger.warning("Failed to export %s: %s", name, detail)
            if verbose:
                print(f"  ✗ {name}: {detail}")

    num_workers = min(config.processes, len(work_items))
    if num_workers <= 1:
        for item in work_items:
            record(_export_worker(item))
        return stats

    if verbose:
        print(f"Exporting {len(work_items)} notebooks using {num_workers} workers...")

    with Pool(num_workers) as pool:
        for result in pool.imap_unordered(_export_worker, work_items):
            record(result)

    return stats
