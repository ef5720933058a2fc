# -*- coding: utf-8 -*-
"""Normalized 2-D Gaussian kernel."""

import math
import numbers

import numpy as np

from .errors import InvalidKernelSize, InvalidSigma


def gaussian_kernel(size: int, sigma: float) -> np.ndarray:
    """Return a ``size x size`` Gaussian weight matrix that sums to 1.

    The kernel is centered on the middle cell (offsets ``-size//2 .. size//2``)
    and returned read-only so it can be shared between worker threads.
    """
    if isinstance(size, bool) or not isinstance(size, numbers.Integral):
        raise InvalidKernelSize(size)
    if size <= 0 or size % 2 == 0:
        raise InvalidKernelSize(size)
    if isinstance(sigma, bool) or not isinstance(sigma, numbers.Real):
        raise InvalidSigma(sigma)
    if not math.isfinite(sigma) or sigma <= 0:
        raise InvalidSigma(sigma)

    size = int(size)
    sigma = float(sigma)
    offset = size // 2
    # scaled offsets; the 1/(2*pi*sigma^2) factor cancels on normalization.
    # Off-center terms may overflow to inf for tiny sigma, giving exp(-inf) = 0.
    with np.errstate(over="ignore"):
        r = np.arange(-offset, offset + 1, dtype=np.float64) / sigma
        ry, rx = np.meshgrid(r, r, indexing="ij")
        kernel = np.exp(-0.5 * (rx * rx + ry * ry))
    kernel /= kernel.sum()

    kernel.setflags(write=False)
    return kernel
