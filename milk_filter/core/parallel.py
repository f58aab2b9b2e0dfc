"""Row-band worker pool shared by the transform passes."""
import concurrent.futures
import logging
import os
from typing import Callable, Optional

LOGGER = logging.getLogger("milk_filter.parallel")

# Bands smaller than this are not worth a thread hop
MIN_BAND_ROWS = 16


def row_bands(height: int, max_workers: Optional[int] = None) -> list[tuple[int, int]]:
    """
    Split `height` rows into contiguous, disjoint [start, stop) bands.

    Bands always cover whole rows, so workers never share a pixel.
    """
    if height <= 0:
        return []
    workers = max_workers if max_workers is not None else (os.cpu_count() or 1)
    workers = max(1, min(workers, -(-height // MIN_BAND_ROWS)))

    step = -(-height // workers)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


def run_row_bands(
    function: Callable[[int, int], None],
    height: int,
    max_workers: Optional[int] = None
) -> None:
    """
    Run `function(start, stop)` for every row band, in parallel when there is
    more than one band. Blocks until all bands finish; the first worker
    exception is re-raised.
    """
    bands = row_bands(height, max_workers)
    if len(bands) <= 1:
        for start, stop in bands:
            function(start, stop)
        return

    LOGGER.debug("Running %d row bands over %d rows", len(bands), height)
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(bands)) as executor:
        futures = [executor.submit(function, start, stop) for start, stop in bands]
        for future in concurrent.futures.as_completed(futures):
            future.result()
