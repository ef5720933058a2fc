#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Band-parallel Gaussian blur for grayscale images.

Pipeline
1) Load → grayscale uint8
2) Build the Gaussian kernel, split rows into bands
3) Blur every band on its own thread, join
4) Save the blurred image (intensity replicated on 3 channels)
5) Report time / memory; optional band table, panel figure, metrics.json

Example:
  python -m bandblur --image img.jpg --output blurred.jpg --ksize 61 --sigma 10 --workers 16
"""

import argparse
import os
import sys

from .dispatch import DEFAULT_KERNEL_SIZE, DEFAULT_SIGMA, DEFAULT_WORKERS, blur, plan_bands
from .errors import BandError, ImageDecodeError, ImageEncodeError, InvalidParameter
from .image_io import load_image, save_image
from .report import band_table, measure, save_panel, summarize, write_metrics


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bandblur",
                                 description="Gaussian blur of a grayscale image, one thread per row band.")
    ap.add_argument("--image", required=True)
    ap.add_argument("--output", required=True)
    ap.add_argument("--format", default=None, help="output format (jpg, png, ...); default: output suffix")

    # blur
    ap.add_argument("--ksize", type=int, default=DEFAULT_KERNEL_SIZE)
    ap.add_argument("--sigma", type=float, default=DEFAULT_SIGMA)
    ap.add_argument("--workers", type=int, default=DEFAULT_WORKERS)
    ap.add_argument("--strict_workers", action="store_true",
                    help="fail instead of using one band per row when --workers exceeds the image height")

    # reporting
    ap.add_argument("--metrics", default=None, help="write a metrics.json summary here")
    ap.add_argument("--panel", default=None, help="save an Original/Blurred figure here")
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    clamp = not args.strict_workers

    try:
        img = load_image(args.image)
        height, width = img.shape[:2]
        if args.verbose:
            print(f"Loaded {args.image}: {width}x{height}")

        with measure() as stats:
            out = blur(img, args.ksize, args.sigma, args.workers, clamp_workers=clamp)
        bands = plan_bands(height, args.workers, clamp)

        save_image(out, args.output, args.format)
        if args.verbose:
            print(band_table(bands))

        print("Gaussian blur applied in parallel.")
        print(f"Time: {stats.elapsed_ms:.0f} ms")
        print(f"Memory: {stats.memory_kb:.0f} KB (peak {stats.peak_memory_kb:.0f} KB)")

        if args.panel:
            save_panel(args.panel, img, out, title=f"ksize={args.ksize}  sigma={args.sigma}")
        if args.metrics:
            summary = summarize(stats,
                                input_image=os.path.abspath(args.image),
                                output_image=os.path.abspath(args.output),
                                width=width, height=height)
            write_metrics(args.metrics, summary, bands, vars(args))
    except InvalidParameter as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (OSError, ImageDecodeError, ImageEncodeError, BandError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("Done. Output →", os.path.abspath(args.output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
