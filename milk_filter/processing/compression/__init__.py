import logging
from typing import Optional
import numpy as np
import numpy.typing as npt

from ...constants import AUTO_BLOCK_SIZE_MAX, BLOCK_SIZE_MAX, COMP_MAX, MIN_QUALITY_FACTOR

from .quantization import jpeg_quantization, quantization_levels, quantization_lut
from .blockiness import jpeg_blockiness

LOGGER = logging.getLogger("milk_filter.compression")


def quality_factor(comp: int) -> float:
    """Map compression strength (0-100) to a quality factor, floored at 0.05."""
    comp = min(max(int(comp), 0), COMP_MAX)
    return max((100 - comp) / 100.0, MIN_QUALITY_FACTOR)


def effective_block_size(comp: int, block_size: int) -> int:
    """Configured block size, or one derived from `comp` when it is 0."""
    block_size = min(max(int(block_size), 0), BLOCK_SIZE_MAX)
    if block_size != 0:
        return block_size

    comp = min(max(int(comp), 0), COMP_MAX)
    derived = int((comp / 100.0) * 7.0 + 0.5)
    return min(max(derived, 1), AUTO_BLOCK_SIZE_MAX)


def simulate_compression(
    image_array: npt.NDArray[np.uint8],
    comp: int,
    quant: bool = True,
    block: bool = True,
    block_size: int = 0,
    max_workers: Optional[int] = None
) -> None:
    """
    Apply the compression artifact passes in place.

    Nothing happens when `comp` is 0. Quantization always runs before
    blockiness.
    """
    if min(max(int(comp), 0), COMP_MAX) == 0:
        return

    if quant:
        factor = quality_factor(comp)
        LOGGER.debug("Quantizing to %d levels", quantization_levels(factor))
        jpeg_quantization(image_array, factor, max_workers)

    if block:
        size = effective_block_size(comp, block_size)
        LOGGER.debug("Averaging %d-pixel blocks", size)
        jpeg_blockiness(image_array, size, max_workers)


__all__ = [
    'effective_block_size',
    'jpeg_blockiness',
    'jpeg_quantization',
    'quality_factor',
    'quantization_levels',
    'quantization_lut',
    'simulate_compression',
]
