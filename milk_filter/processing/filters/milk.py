import numpy as np
import numpy.typing as npt
from typing import Optional, Sequence

from ...constants import (
    BUCKET_SELECTORS,
    DARK_MAX,
    HIGHLIGHT_MIN,
    MID_THRESHOLDS_ALT,
    MID_THRESHOLDS_DEFAULT,
    PALETTE_ALT,
    PALETTE_DEFAULT,
    POINTISM_CHANCE,
    ROW_SEED_SALT,
    SHADOW_MAX,
)
from ...core.parallel import run_row_bands
from ..rng import stream_f32


def bucket_edges(alt: bool) -> npt.NDArray[np.int64]:
    """Lowest brightness of buckets 2-6, ascending."""
    thr_mid1, thr_mid2 = MID_THRESHOLDS_ALT if alt else MID_THRESHOLDS_DEFAULT
    return np.array([SHADOW_MAX + 1, DARK_MAX + 1, thr_mid1, thr_mid2, HIGHLIGHT_MIN], dtype=np.int64)


def row_seed(width: int, row: int) -> int:
    """Seed of the tie-break stream for one row."""
    return ((width * 3 + row) & 0xFFFFFFFFFFFFFFFF) ^ ROW_SEED_SALT


def resolve_overrides(overrides: Sequence[Optional[int]]) -> list[Optional[int]]:
    """Clamp set overrides into the palette range; unset stays None."""
    return [None if o is None else min(max(int(o), 0), 2) for o in overrides]


def milk_filter(
    image_array: npt.NDArray[np.uint8],
    alt: bool = False,
    pointism: bool = False,
    eff: int = 0,
    overrides: Sequence[Optional[int]] = (None,) * 6,
    max_workers: Optional[int] = None
) -> None:
    """
    Map every pixel to one of three palette colors by brightness, in place.

    Brightness (r + g + b) // 3 falls into one of six ascending buckets. A
    bucket with an override always takes that palette color. Otherwise it
    takes its default selector: either a fixed color, or a likely color kept
    with probability `chance` and a fallback color otherwise. Each randomized
    pixel draws one value from its row's SplitMix64 stream, left to right, so
    the result depends only on (width, row) and the pixel content.

    Args:
        image_array: RGB24 array (height, width, 3), modified in place.
        alt: Use the alternative palette and its mid thresholds.
        pointism: Randomize ties with chance 0.7 instead of 1.0.
        eff: 1 selects the darker tie-break direction, anything else the other.
        overrides: Six optional palette indices, one per bucket (s1..s6).
        max_workers: Worker threads for the row bands.
    """
    height, width, _ = image_array.shape
    colors = np.array(PALETTE_ALT if alt else PALETTE_DEFAULT, dtype=np.uint8)
    chance = POINTISM_CHANCE if pointism else 1.0
    edges = bucket_edges(alt)

    selectors = BUCKET_SELECTORS[1 if eff == 1 else 0]
    resolved = resolve_overrides(list(overrides)[:6] + [None] * (6 - len(overrides)))

    # Per-bucket lookup: index kept on a hit (or when fixed), index on a miss,
    # and whether the bucket consumes a draw.
    likely = np.array([o if o is not None else s[0] for o, s in zip(resolved, selectors)], dtype=np.intp)
    fallback = np.array([o if o is not None else s[1] for o, s in zip(resolved, selectors)], dtype=np.intp)
    randomized = np.array([o is None and s[0] != s[1] for o, s in zip(resolved, selectors)], dtype=bool)

    def filter_band(start: int, stop: int) -> None:
        band = image_array[start:stop]
        bright = band.astype(np.uint16).sum(axis=2) // 3
        buckets = np.searchsorted(edges, bright, side='right')

        choice = likely[buckets]
        needs_draw = randomized[buckets]
        if needs_draw.any():
            steps = np.cumsum(needs_draw, axis=1)
            seeds = np.array([row_seed(width, y) for y in range(start, stop)], dtype=np.uint64)
            draws = stream_f32(seeds[:, np.newaxis], steps)
            missed = needs_draw & ~(draws < chance)
            choice = np.where(missed, fallback[buckets], choice)

        band[...] = colors[choice]

    run_row_bands(filter_band, height, max_workers)
