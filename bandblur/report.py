# -*- coding: utf-8 -*-
"""Run bookkeeping around the blur: timing, memory, band table, figures, metrics."""

import json
import os
import time
import tracemalloc
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from typing import Iterator, List, Optional, Sequence

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from tabulate import tabulate

from .dispatch import Band
from .image_io import ensure_dir


@dataclass
class RunStats:
    elapsed_ms: float = 0.0
    memory_kb: float = 0.0
    peak_memory_kb: float = 0.0


@contextmanager
def measure() -> Iterator[RunStats]:
    """Measure wall-clock time and traced heap usage of the enclosed block."""
    stats = RunStats()
    started = not tracemalloc.is_tracing()
    if started:
        tracemalloc.start()
    tracemalloc.reset_peak()
    mem0, _ = tracemalloc.get_traced_memory()
    t0 = time.perf_counter()
    try:
        yield stats
    finally:
        stats.elapsed_ms = (time.perf_counter() - t0) * 1000.0
        mem1, peak = tracemalloc.get_traced_memory()
        stats.memory_kb = (mem1 - mem0) / 1024.0
        stats.peak_memory_kb = max(0, peak - mem0) / 1024.0
        if started:
            tracemalloc.stop()


def band_rows(bands: Sequence[Band]) -> List[dict]:
    return [{"band": i, "start_row": b.start_row, "end_row": b.end_row,
             "rows": b.end_row - b.start_row}
            for i, b in enumerate(bands)]


def band_table(bands: Sequence[Band]) -> str:
    rows = [[r["band"], r["start_row"], r["end_row"], r["rows"]] for r in band_rows(bands)]
    return tabulate(rows, headers=["Band", "Start row", "End row", "Rows"], tablefmt="grid")


def save_panel(path: str, original: np.ndarray, blurred: np.ndarray, title: Optional[str] = None) -> None:
    """Side-by-side Original / Blurred figure."""
    if blurred.ndim == 3:
        blurred = blurred[:, :, 0]
    ensure_dir(os.path.dirname(path))

    # figure bound to its own Agg canvas, the pyplot backend is left alone
    fig = Figure(figsize=(10, 5))
    FigureCanvasAgg(fig)
    if title:
        fig.suptitle(title, fontsize=14)
    ax1, ax2 = fig.subplots(1, 2)
    ax1.set_title("Original"); ax1.imshow(original, cmap="gray", vmin=0, vmax=255); ax1.axis("off")
    ax2.set_title("Blurred");  ax2.imshow(blurred, cmap="gray", vmin=0, vmax=255); ax2.axis("off")
    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")


def write_metrics(path: str, summary: dict, bands: Sequence[Band], params: dict) -> None:
    ensure_dir(os.path.dirname(path))
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"summary": summary, "bands": band_rows(bands), "params": params}, f, indent=2)


def summarize(stats: RunStats, **fields) -> dict:
    summary = dict(fields)
    summary.update(asdict(stats))
    return summary
