"""
Assemble rendered pages into one document.

Pages are independent once decoded, so they can be rendered on a
thread pool. Results land in slots addressed by page index, never in
completion order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import Iterator, Optional

from .errors import ConversionCancelled
from .parser import CancelSignal, Notebook, Page
from .renderer import RenderedPage, render_page

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedDocument:
    """Rendered pages, in notebook order."""
    pages: tuple[RenderedPage, ...] = ()

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[RenderedPage]:
        return iter(self.pages)

    @property
    def path_count(self) -> int:
        return sum(len(page.paths) for page in self.pages)


def _render_worker(args: tuple[int, Page]) -> RenderedPage:
    index, page = args
    return render_page(page, index)


def _check_cancel(cancel: Optional[CancelSignal]) -> None:
    if cancel is not None and cancel.is_set():
        raise ConversionCancelled("Rendering cancelled")


def assemble_document(
    notebook: Notebook,
    workers: int = 1,
    cancel: Optional[CancelSignal] = None,
) -> RenderedDocument:
    """
    Render every page of a notebook.

    Args:
        notebook: Decoded notebook
        workers: Number of render threads (1 renders inline)
        cancel: Optional signal checked between page renders

    Returns:
        RenderedDocument with exactly one page per notebook page

    Raises:
        ConversionCancelled: ``cancel`` was set before all pages finished
    """
    page_count = len(notebook.pages)
    slots: list[Optional[RenderedPage]] = [None] * page_count
    work_items = list(enumerate(notebook.pages))

    if workers <= 1 or page_count <= 1:
        for item in work_items:
            _check_cancel(cancel)
            rendered = _render_worker(item)
            slots[rendered.index] = rendered
    else:
        num_workers = min(workers, page_count)
        _logger.debug("Rendering %d pages on %d threads", page_count, num_workers)

        # Pages queued behind a cancel are skipped, not rendered
        def render_unless_cancelled(item: tuple[int, Page]) -> RenderedPage:
            _check_cancel(cancel)
            return _render_worker(item)

        with ThreadPool(num_workers) as pool:
            for rendered in pool.imap_unordered(render_unless_cancelled, work_items):
                _check_cancel(cancel)
                slots[rendered.index] = rendered

    _check_cancel(cancel)
    return RenderedDocument(tuple(slots))
