# -*- coding: utf-8 -*-
"""Load and save image buffers with OpenCV."""

import os
from typing import Optional

import cv2
import numpy as np

from .errors import ImageDecodeError, ImageEncodeError

DEFAULT_FORMAT = "png"


def ensure_dir(p: str) -> None:
    if p:
        os.makedirs(p, exist_ok=True)


def load_image(path: str) -> np.ndarray:
    """Read ``path`` as an 8-bit single-channel image."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Could not read image: {path}")
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ImageDecodeError(f"Unsupported or corrupt image: {path}")

    if img.ndim == 3:
        if img.shape[2] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
        elif img.shape[2] == 3:
            img = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
        else:
            img = img[:, :, 0]
    if img.dtype == np.uint16:
        img = (img // 257).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    return img


def save_image(image: np.ndarray, path: str, fmt: Optional[str] = None) -> None:
    """Encode ``image`` as ``fmt`` (default: the path's suffix) and write it to ``path``."""
    ext = (fmt or os.path.splitext(path)[1] or DEFAULT_FORMAT).lower().lstrip(".")
    try:
        ok, data = cv2.imencode("." + ext, image)
    except cv2.error as e:
        raise ImageEncodeError(f"Could not encode image as {ext!r}: {e}") from e
    if not ok:
        raise ImageEncodeError(f"Could not encode image as {ext!r}")

    ensure_dir(os.path.dirname(path))
    with open(path, "wb") as f:
        f.write(data.tobytes())
