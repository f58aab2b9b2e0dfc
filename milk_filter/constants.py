from typing import Literal, Tuple

Color = Tuple[int, int, int]

# Palettes, selected by the `alt` flag. Index 0 is always black.
PALETTE_DEFAULT: Tuple[Color, Color, Color] = (
    (0, 0, 0),
    (102, 0, 31),     # #66001F
    (137, 0, 146),    # #890092
)
PALETTE_ALT: Tuple[Color, Color, Color] = (
    (0, 0, 0),
    (92, 36, 60),     # #5C243C
    (203, 43, 43),    # #CB2B2B
)

# Lower edge of the middle buckets (thr_mid1, thr_mid2) for each palette
MID_THRESHOLDS_DEFAULT: Tuple[int, int] = (120, 200)
MID_THRESHOLDS_ALT: Tuple[int, int] = (90, 150)

# Fixed bucket edges: bright <= 25 is the first bucket, <= 70 the second,
# bright >= 230 the last.
SHADOW_MAX: int = 25
DARK_MAX: int = 70
HIGHLIGHT_MIN: int = 230

# Probability that a randomized bucket keeps its likely color in pointillism mode
POINTISM_CHANCE: float = 0.7

# Row seed salt for the per-row stream generator
ROW_SEED_SALT: int = 0x123456789ABCDEF0

# Default selection per bucket as (likely, fallback) palette indices.
# likely == fallback means the bucket is fixed and consumes no random draw.
Selector = Tuple[int, int]
BUCKET_SELECTORS: dict[int, Tuple[Selector, ...]] = {
    # eff == 1
    1: ((0, 0), (1, 0), (0, 0), (0, 1), (2, 2), (2, 2)),
    # eff != 1
    0: ((0, 0), (0, 1), (1, 0), (1, 1), (2, 1), (2, 2)),
}

# Compression artifact limits
COMP_MAX: int = 100
BLOCK_SIZE_MAX: int = 64
AUTO_BLOCK_SIZE_MAX: int = 8
MIN_QUALITY_FACTOR: float = 0.05

ImageState = Literal['empty', 'loaded', 'processed']
OutputFormat = Literal['PNG', 'JPEG']

# Encodings accepted on input, and output encodings by file suffix
INPUT_FORMATS: Tuple[str, ...] = ('PNG', 'JPEG')
OUTPUT_SUFFIXES: dict[str, OutputFormat] = {
    '.png': 'PNG',
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
}
