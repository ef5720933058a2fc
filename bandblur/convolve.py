# -*- coding: utf-8 -*-
"""
Band convolution with edge clamping.

A band is a half-open range of rows [start_row, end_row). Each output pixel is
the kernel-weighted sum of its neighborhood in the source, where samples that
fall outside the image reuse the nearest edge pixel. The result is rounded
half up, clamped to 0..255 and written to every channel of the output pixel.
"""

import numpy as np


def intensity_plane(source: np.ndarray) -> np.ndarray:
    """Single-channel view of ``source``; multi-channel input is read from channel 0."""
    if source.ndim == 3:
        return source[:, :, 0]
    return source


def clamped_indices(start: int, stop: int, offset: int, limit: int) -> np.ndarray:
    """Indices ``start-offset .. stop+offset-1`` clamped into ``[0, limit)``."""
    return np.clip(np.arange(start - offset, stop + offset), 0, limit - 1)


def convolve_band(source: np.ndarray, kernel: np.ndarray, output: np.ndarray,
                  start_row: int, end_row: int) -> None:
    """Blur rows ``[start_row, end_row)`` of ``source`` into the same rows of ``output``.

    ``source`` and ``kernel`` are only read. Nothing outside the band's rows of
    ``output`` is touched, so bands can run concurrently on one output buffer.
    """
    plane = intensity_plane(source)
    height, width = plane.shape
    if not 0 <= start_row < end_row <= height:
        raise ValueError(f"band [{start_row}, {end_row}) outside image rows [0, {height})")

    size = kernel.shape[0]
    offset = size // 2
    band_h = end_row - start_row

    # clamped neighborhood of the whole band, gathered once
    rows = clamped_indices(start_row, end_row, offset, height)
    cols = clamped_indices(0, width, offset, width)
    window = plane[np.ix_(rows, cols)].astype(np.float64)

    acc = np.zeros((band_h, width), dtype=np.float64)
    term = np.empty_like(acc)
    for ky in range(size):
        for kx in range(size):
            np.multiply(window[ky:ky + band_h, kx:kx + width], kernel[ky, kx], out=term)
            acc += term

    values = np.clip(np.floor(acc + 0.5), 0, 255).astype(np.uint8)
    if output.ndim == 3:
        output[start_row:end_row] = values[:, :, np.newaxis]
    else:
        output[start_row:end_row] = values
