import sys
from pathlib import Path

# Add project root to path so we can import milk_filter
sys.path.append(str(Path(__file__).parent.parent))

import numpy as np
import pytest
from milk_filter.processing.compression import (
    effective_block_size,
    jpeg_blockiness,
    jpeg_quantization,
    quality_factor,
    quantization_levels,
    quantization_lut,
    simulate_compression,
)

def random_image(height, width, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)

def test_quality_factor_floor():
    assert quality_factor(0) == 1.0
    assert quality_factor(40) == pytest.approx(0.6)
    assert quality_factor(95) == 0.05
    assert quality_factor(100) == 0.05
    # Out of range values are clamped, not rejected
    assert quality_factor(250) == 0.05
    assert quality_factor(-3) == 1.0

def test_quantization_levels():
    assert quantization_levels(0.0) == 2
    assert quantization_levels(1.0) == 256
    assert quantization_levels(0.5) == 129
    assert quantization_levels(0.05) == 15
    assert quantization_levels(7.0) == 256

def test_two_level_lut():
    lut = quantization_lut(0.0)
    assert np.all(lut[:128] == 0)
    assert np.all(lut[128:] == 255)

def test_full_quality_lut_is_identity():
    assert np.array_equal(quantization_lut(1.0), np.arange(256, dtype=np.uint8))

@pytest.mark.parametrize('comp', range(1, 101))
def test_lut_is_monotonic(comp):
    lut = quantization_lut(quality_factor(comp)).astype(int)
    assert np.all(np.diff(lut) >= 0)
    assert lut[0] == 0
    assert lut[255] == 255

@pytest.mark.parametrize('comp', [92, 93, 95, 96, 97, 98, 99, 100])
def test_lut_is_idempotent_at_low_quality(comp):
    """Level representatives map to themselves for coarse level counts."""
    lut = quantization_lut(quality_factor(comp))
    assert np.array_equal(lut[lut], lut)

def test_quantization_applies_lut_to_every_byte():
    img = random_image(40, 33)
    expected = quantization_lut(0.3)[img]

    jpeg_quantization(img, 0.3, max_workers=3)

    assert np.array_equal(img, expected)

def test_quantization_reduces_distinct_values():
    img = random_image(64, 64, seed=3)
    jpeg_quantization(img, quality_factor(100))
    assert len(np.unique(img)) <= 15

def expected_blocks(img, block_size):
    """Reference: truncated mean of each horizontal run of the original pixels."""
    out = img.copy()
    height, width, _ = img.shape
    for y in range(height):
        for x0 in range(0, width, block_size):
            block = img[y, x0:x0 + block_size].astype(np.int64)
            out[y, x0:x0 + block_size] = block.sum(axis=0) // len(block)
    return out

@pytest.mark.parametrize('block_size', [2, 3, 4, 7, 8, 64])
def test_blockiness_exact_means(block_size):
    img = random_image(17, 30, seed=block_size)
    expected = expected_blocks(img, block_size)

    jpeg_blockiness(img, block_size, max_workers=4)

    assert np.array_equal(img, expected)

def test_blockiness_trailing_partial_block():
    """A 5-pixel row with size 3 averages the last 2 pixels on their own."""
    img = np.array([[[0, 0, 0], [3, 6, 9], [6, 12, 18], [10, 20, 30], [11, 21, 31]]], dtype=np.uint8)

    jpeg_blockiness(img, 3)

    assert img[0].tolist() == [
        [3, 6, 9], [3, 6, 9], [3, 6, 9],
        [10, 20, 30], [10, 20, 30],
    ]

@pytest.mark.parametrize('block_size', [-1, 0, 1])
def test_blockiness_small_sizes_are_noop(block_size):
    img = random_image(8, 9)
    original = img.copy()
    jpeg_blockiness(img, block_size)
    assert np.array_equal(img, original)

def test_blockiness_stays_within_rows():
    img = np.zeros((2, 4, 3), dtype=np.uint8)
    img[1] = 200
    jpeg_blockiness(img, 4)
    assert np.all(img[0] == 0)
    assert np.all(img[1] == 200)

def test_effective_block_size():
    assert effective_block_size(100, 0) == 7
    assert effective_block_size(50, 0) == 4
    assert effective_block_size(1, 0) == 1
    assert effective_block_size(30, 5) == 5
    assert effective_block_size(30, 500) == 64

def test_simulate_compression_comp_zero_is_noop():
    img = random_image(10, 10)
    original = img.copy()
    simulate_compression(img, 0, quant=True, block=True, block_size=4)
    assert np.array_equal(img, original)

def test_simulate_compression_quantizes_before_blocking():
    img = random_image(20, 21, seed=9)
    expected = quantization_lut(quality_factor(60))[img]
    expected = expected_blocks(expected, 3)

    simulate_compression(img, 60, quant=True, block=True, block_size=3)

    assert np.array_equal(img, expected)

def test_simulate_compression_respects_pass_flags():
    img = random_image(12, 12, seed=4)
    quant_only = img.copy()
    block_only = img.copy()

    simulate_compression(quant_only, 80, quant=True, block=False)
    simulate_compression(block_only, 80, quant=False, block=True, block_size=4)

    assert np.array_equal(quant_only, quantization_lut(quality_factor(80))[img])
    assert np.array_equal(block_only, expected_blocks(img, 4))
