# -*- coding: utf-8 -*-
"""Band-parallel Gaussian blur of grayscale images."""

from .convolve import convolve_band
from .dispatch import Band, blur, partition_rows, plan_bands
from .errors import (BandError, BlurError, EmptySource, ImageDecodeError, ImageEncodeError,
                     InvalidKernelSize, InvalidParameter, InvalidSigma, InvalidWorkerCount)
from .image_io import load_image, save_image
from .kernel import gaussian_kernel

__version__ = "0.1.0"
