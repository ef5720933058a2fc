# -*- coding: utf-8 -*-
"""Errors raised by the blur engine and its image I/O helpers."""


class BlurError(Exception):
    """Base class for everything the blur engine raises."""


class InvalidParameter(BlurError, ValueError):
    """A run parameter failed validation before any work started."""

    def __init__(self, parameter, value, reason):
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter}={value!r}: {reason}")


class InvalidKernelSize(InvalidParameter):
    def __init__(self, value):
        super().__init__("kernel_size", value, "must be a positive odd integer")


class InvalidSigma(InvalidParameter):
    def __init__(self, value):
        super().__init__("sigma", value, "must be a positive finite number")


class InvalidWorkerCount(InvalidParameter):
    def __init__(self, value, height=None):
        if height is None:
            reason = "must be a positive integer"
        else:
            reason = f"must be in [1, {height}] (one row per band at least)"
        super().__init__("worker_count", value, reason)


class EmptySource(InvalidParameter):
    def __init__(self, shape):
        super().__init__("source", shape, "image must have a non-zero width and height")


class BandError(BlurError, RuntimeError):
    """A worker failed while convolving its band; the run has no usable output."""

    def __init__(self, band, cause):
        self.band = band
        super().__init__(f"band rows [{band.start_row}, {band.end_row}) failed: {cause!r}")


# ---------------------------- I/O ----------------------------

class ImageDecodeError(ValueError):
    pass


class ImageEncodeError(ValueError):
    pass
