import time
import numpy as np
import numpy.typing as npt

MASK64 = 0xFFFFFFFFFFFFFFFF
GAMMA = 0x9E3779B97F4A7C15
MIX1 = 0xBF58476D1CE4E5B9
MIX2 = 0x94D049BB133111EB


class SplitMix64:
    """
    SplitMix64 stream generator.

    Same seed gives the same sequence on every platform. All arithmetic is
    modulo 2**64.
    """

    def __init__(self, seed: int = 0):
        self.state = seed & MASK64

    def next_u64(self) -> int:
        self.state = (self.state + GAMMA) & MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * MIX1) & MASK64
        z = ((z ^ (z >> 27)) * MIX2) & MASK64
        return z ^ (z >> 31)

    def next_u32(self) -> int:
        return self.next_u64() >> 32

    def next_f64(self) -> float:
        return self.next_u64() / 2.0 ** 64

    def next_f32(self) -> float:
        return self.next_u32() / 2.0 ** 32

    def probably(self, chance: float) -> bool:
        """Draw one value and return True iff it is below `chance`."""
        return self.next_f32() < chance


def random_u64() -> int:
    """Time-seeded 64-bit value, used for throwaway file names."""
    return SplitMix64(time.time_ns() // 1_000_000).next_u64()


def stream_f32(
    seeds: npt.NDArray[np.uint64],
    steps: npt.NDArray[np.integer]
) -> npt.NDArray[np.float64]:
    """
    Evaluate SplitMix64 streams at arbitrary positions in one vectorized call.

    The state after n steps is seed + n * GAMMA, so the n-th draw needs no
    sequential stepping. Result element i equals the `steps[i]`-th call of
    `SplitMix64(seeds[i]).next_f32()` (steps are 1-based). Arrays broadcast.

    Args:
        seeds: uint64 stream seeds.
        steps: 1-based draw positions.

    Returns:
        float64 values in [0, 1).
    """
    seeds = np.asarray(seeds, dtype=np.uint64)
    steps = np.asarray(steps).astype(np.uint64)

    # uint64 arithmetic wraps modulo 2**64
    with np.errstate(over='ignore'):
        z = seeds + steps * np.uint64(GAMMA)
        z = (z ^ (z >> np.uint64(30))) * np.uint64(MIX1)
        z = (z ^ (z >> np.uint64(27))) * np.uint64(MIX2)
    z = z ^ (z >> np.uint64(31))

    return (z >> np.uint64(32)).astype(np.float64) / 2.0 ** 32
