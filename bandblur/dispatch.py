# -*- coding: utf-8 -*-
"""
Band dispatcher: split the image rows, blur every band on its own thread, join.

1) validate parameters (nothing runs concurrently before this passes)
2) build the kernel once
3) partition rows into contiguous bands, the last band takes the remainder
4) one task per band on a thread pool, each writing only its own rows
5) wait for every task, then hand back the output buffer
"""

import numbers
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List

import numpy as np

from .convolve import convolve_band
from .errors import BandError, EmptySource, InvalidWorkerCount
from .kernel import gaussian_kernel

DEFAULT_KERNEL_SIZE = 61
DEFAULT_SIGMA = 10.0
DEFAULT_WORKERS = 16

OUTPUT_CHANNELS = 3

Band = namedtuple("Band", ["start_row", "end_row"])


def partition_rows(height: int, worker_count: int) -> List[Band]:
    """Split ``[0, height)`` into ``worker_count`` contiguous bands."""
    if height <= 0:
        raise EmptySource((height,))
    _check_worker_count(worker_count, height)

    band_height = height // worker_count
    bands = []
    for i in range(worker_count):
        start = i * band_height
        end = height if i == worker_count - 1 else start + band_height
        bands.append(Band(start, end))
    return bands


def plan_bands(height: int, worker_count: int, clamp_workers: bool = False) -> List[Band]:
    """Bands a run over ``height`` rows uses; with ``clamp_workers`` at most one band per row."""
    if clamp_workers and isinstance(worker_count, numbers.Integral) and worker_count > height > 0:
        worker_count = height
    return partition_rows(height, worker_count)


def _check_worker_count(worker_count, height):
    if isinstance(worker_count, bool) or not isinstance(worker_count, numbers.Integral):
        raise InvalidWorkerCount(worker_count)
    if worker_count <= 0:
        raise InvalidWorkerCount(worker_count)
    if worker_count > height:
        raise InvalidWorkerCount(worker_count, height)


def _check_source(source):
    if not isinstance(source, np.ndarray) or source.ndim not in (2, 3):
        raise EmptySource(getattr(source, "shape", None))
    if source.shape[0] == 0 or source.shape[1] == 0:
        raise EmptySource(source.shape)
    if source.ndim == 3 and source.shape[2] == 0:
        raise EmptySource(source.shape)


def blur(source: np.ndarray,
         kernel_size: int = DEFAULT_KERNEL_SIZE,
         sigma: float = DEFAULT_SIGMA,
         worker_count: int = DEFAULT_WORKERS,
         clamp_workers: bool = False) -> np.ndarray:
    """Gaussian-blur a grayscale image band by band on ``worker_count`` threads.

    Returns a new ``uint8`` buffer of shape ``(height, width, 3)`` with the
    intensity replicated in every channel. ``source`` is never modified.

    ``worker_count`` larger than the image height raises
    :class:`InvalidWorkerCount` unless ``clamp_workers`` is set, in which case
    one band per row is used.
    """
    _check_source(source)
    height, width = source.shape[:2]
    bands = plan_bands(height, worker_count, clamp_workers)

    kernel = gaussian_kernel(kernel_size, sigma)
    output = np.zeros((height, width, OUTPUT_CHANNELS), dtype=np.uint8)

    with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as pool:
        futures = [pool.submit(convolve_band, source, kernel, output, b.start_row, b.end_row)
                   for b in bands]
        wait(futures)

    for band, future in zip(bands, futures):
        exc = future.exception()
        if exc is not None:
            raise BandError(band, exc) from exc
    return output
