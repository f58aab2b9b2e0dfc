import numpy as np
import numpy.typing as npt
from numba import jit
from typing import Optional

from ...core.parallel import run_row_bands


@jit(nopython=True, nogil=True)
def _blockiness_jit(rows: npt.NDArray[np.uint8], block_size: int) -> None:
    """
    Core block averaging loop optimized with Numba.

    Each row is cut into runs of `block_size` pixels; every pixel of a run
    takes the truncated mean of the run. The last run of a row may be shorter
    and is averaged over its own length.
    """
    height, width, _ = rows.shape

    for y in range(height):
        for x0 in range(0, width, block_size):
            x1 = min(x0 + block_size, width)
            count = x1 - x0

            sum_r = 0
            sum_g = 0
            sum_b = 0
            for x in range(x0, x1):
                sum_r += rows[y, x, 0]
                sum_g += rows[y, x, 1]
                sum_b += rows[y, x, 2]

            avg_r = sum_r // count
            avg_g = sum_g // count
            avg_b = sum_b // count
            for x in range(x0, x1):
                rows[y, x, 0] = avg_r
                rows[y, x, 1] = avg_g
                rows[y, x, 2] = avg_b


def jpeg_blockiness(
    image_array: npt.NDArray[np.uint8],
    block_size: int,
    max_workers: Optional[int] = None
) -> None:
    """
    Simulate macroblocking by averaging horizontal pixel runs in place.

    Blocks are one row tall; there is no averaging across rows.

    Args:
        image_array: RGB24 array (height, width, 3), modified in place.
        block_size: Run length in pixels. Sizes <= 1 leave the image unchanged.
        max_workers: Worker threads for the row bands.
    """
    if block_size <= 1:
        return

    def average_band(start: int, stop: int) -> None:
        _blockiness_jit(image_array[start:stop], int(block_size))

    run_row_bands(average_band, image_array.shape[0], max_workers)
