import threading

import numpy as np
import pytest

import bandblur.dispatch as dispatch
from bandblur.dispatch import Band, blur, partition_rows, plan_bands
from bandblur.errors import (BandError, BlurError, EmptySource, InvalidKernelSize, InvalidSigma,
                             InvalidWorkerCount)


@pytest.mark.parametrize("height", [1, 2, 3, 7, 16, 17, 50, 101])
def test_partition_covers_all_rows(height):
    for workers in range(1, height + 1):
        bands = partition_rows(height, workers)
        assert len(bands) == workers
        assert bands[0].start_row == 0
        assert bands[-1].end_row == height
        for prev, cur in zip(bands, bands[1:]):
            assert prev.end_row == cur.start_row
        assert all(b.start_row < b.end_row for b in bands)
        assert sum(b.end_row - b.start_row for b in bands) == height


def test_last_band_takes_remainder():
    assert partition_rows(10, 3) == [Band(0, 3), Band(3, 6), Band(6, 10)]
    assert partition_rows(35, 16)[-1] == Band(30, 35)
    assert partition_rows(4, 4) == [Band(0, 1), Band(1, 2), Band(2, 3), Band(3, 4)]


@pytest.mark.parametrize("workers", [0, -2, 11, 2.0, None])
def test_partition_rejects_bad_worker_counts(workers):
    with pytest.raises(InvalidWorkerCount):
        partition_rows(10, workers)


def test_output_shape_matches_source(noise_image):
    out = blur(noise_image, 7, 2.0, 4)
    assert out.shape == noise_image.shape + (3,)
    assert out.dtype == np.uint8


def test_worker_count_does_not_change_result(noise_image):
    ref = blur(noise_image, 9, 3.0, 1)
    for workers in (2, 3, 7, 16, 40):
        assert np.array_equal(blur(noise_image, 9, 3.0, workers), ref)


def test_repeated_runs_are_identical(noise_image):
    runs = [blur(noise_image, 15, 4.0, 16).tobytes() for _ in range(3)]
    assert runs[0] == runs[1] == runs[2]


def test_defaults_on_uniform_image():
    img = np.full((20, 12), 200, dtype=np.uint8)
    assert (blur(img) == 200).all()


def test_impulse_end_to_end(impulse_3x3):
    out = blur(impulse_3x3, 3, 1.0, 3)
    assert out[:, :, 0].tolist() == [[19, 32, 19], [32, 52, 32], [19, 32, 19]]


def test_source_left_untouched(noise_image):
    before = noise_image.copy()
    blur(noise_image, 5, 1.0, 8)
    assert np.array_equal(noise_image, before)


def test_single_row_image():
    row = np.array([[0, 0, 255, 0, 0]], dtype=np.uint8)
    out = blur(row, 3, 1.0, 1)
    assert out.shape == (1, 5, 3)
    # clamped rows turn the 2-D kernel into its 1-D marginal
    assert out[0, :, 0].tolist() == [0, 70, 115, 70, 0]
    assert blur(row, 61, 10.0, 1).shape == (1, 5, 3)


@pytest.mark.parametrize("shape", [(0, 5), (5, 0), (0, 0), (3, 3, 0), (4,)])
def test_empty_source(shape):
    with pytest.raises(EmptySource):
        blur(np.zeros(shape, dtype=np.uint8), 3, 1.0, 1)


def test_non_array_source():
    with pytest.raises(EmptySource):
        blur([[1, 2], [3, 4]], 3, 1.0, 1)


@pytest.mark.parametrize("workers", [0, -1, 41])
def test_invalid_worker_count(noise_image, workers):
    with pytest.raises(InvalidWorkerCount) as info:
        blur(noise_image, 3, 1.0, workers)
    assert info.value.parameter == "worker_count"


def test_clamp_workers_uses_one_band_per_row(noise_image):
    out = blur(noise_image, 5, 1.0, 1000, clamp_workers=True)
    assert np.array_equal(out, blur(noise_image, 5, 1.0, 1))
    with pytest.raises(InvalidWorkerCount):
        blur(noise_image, 5, 1.0, 0, clamp_workers=True)


def test_parameters_checked_before_any_work(noise_image, monkeypatch):
    calls = []
    monkeypatch.setattr(dispatch, "convolve_band", lambda *a: calls.append(a))
    with pytest.raises(InvalidKernelSize):
        blur(noise_image, 4, 1.0, 2)
    with pytest.raises(InvalidSigma):
        blur(noise_image, 3, -1.0, 2)
    assert calls == []


def test_worker_failure_fails_the_run(noise_image, monkeypatch):
    real = dispatch.convolve_band
    finished = []
    lock = threading.Lock()

    def flaky(source, kernel, output, start_row, end_row):
        if start_row == 10:
            raise MemoryError("simulated")
        real(source, kernel, output, start_row, end_row)
        with lock:
            finished.append(start_row)

    monkeypatch.setattr(dispatch, "convolve_band", flaky)
    with pytest.raises(BandError) as info:
        blur(noise_image, 3, 1.0, 4)
    assert info.value.band == Band(10, 20)
    assert isinstance(info.value.__cause__, MemoryError)
    assert isinstance(info.value, BlurError)
    # every other band still ran to completion before the error surfaced
    assert sorted(finished) == [0, 20, 30]


def test_plan_bands_clamps_only_when_asked():
    assert plan_bands(3, 16, clamp_workers=True) == [Band(0, 1), Band(1, 2), Band(2, 3)]
    assert plan_bands(10, 3, clamp_workers=True) == partition_rows(10, 3)
    with pytest.raises(InvalidWorkerCount):
        plan_bands(3, 16)
    with pytest.raises(InvalidWorkerCount):
        plan_bands(3, 0, clamp_workers=True)


def test_blur_runs_the_planned_bands(noise_image, monkeypatch):
    seen = []
    lock = threading.Lock()
    real = dispatch.convolve_band

    def record(source, kernel, output, start_row, end_row):
        with lock:
            seen.append(Band(start_row, end_row))
        real(source, kernel, output, start_row, end_row)

    monkeypatch.setattr(dispatch, "convolve_band", record)
    blur(noise_image, 3, 1.0, 100, clamp_workers=True)
    assert sorted(seen) == plan_bands(40, 100, clamp_workers=True)
