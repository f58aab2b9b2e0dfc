import numpy as np
import numpy.typing as npt
from typing import Optional

from ...core.parallel import run_row_bands


def quantization_levels(quality_factor: float) -> int:
    """Number of intensity levels kept for a quality factor in [0, 1]."""
    quality_factor = min(max(quality_factor, 0.0), 1.0)
    # Round half up
    levels = int(2.0 + 254.0 * quality_factor + 0.5)
    return min(max(levels, 2), 256)


def quantization_lut(quality_factor: float) -> npt.NDArray[np.uint8]:
    """
    Build the 256-entry byte -> byte table mapping every value to the
    representative of its level.
    """
    num_levels = quantization_levels(quality_factor)
    values = np.arange(256, dtype=np.uint32)
    levels = (values * num_levels) // 256
    lut = np.minimum((levels * 255) // (num_levels - 1), 255)
    return lut.astype(np.uint8)


def jpeg_quantization(
    image_array: npt.NDArray[np.uint8],
    quality_factor: float,
    max_workers: Optional[int] = None
) -> None:
    """
    Reduce per-channel intensity precision in place.

    Every byte is mapped independently through the level table, so the
    channel a byte belongs to does not matter.

    Args:
        image_array: RGB24 array (height, width, 3), modified in place.
        quality_factor: 0.0 (2 levels) to 1.0 (256 levels).
        max_workers: Worker threads for the row bands.
    """
    lut = quantization_lut(quality_factor)

    def quantize_band(start: int, stop: int) -> None:
        band = image_array[start:stop]
        band[...] = lut[band]

    run_row_bands(quantize_band, image_array.shape[0], max_workers)
