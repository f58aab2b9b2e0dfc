from dataclasses import dataclass, field
from typing import Optional


@dataclass
class MilkConfig:
    """
    Live filter settings, edited in place by the shell between runs.

    Nothing is validated on assignment. Numeric fields are clamped by the
    passes that read them: `comp` to 0-100, `block_size` to 0-64 (0 derives
    the size from `comp`), and overrides to palette indices 0-2.
    """
    enabled: bool = True
    alt: bool = False
    pointism: bool = False
    comp: int = 0
    quant: bool = True
    block: bool = True
    block_size: int = 0
    eff: int = 0
    s1: Optional[int] = None
    s2: Optional[int] = None
    s3: Optional[int] = None
    s4: Optional[int] = None
    s5: Optional[int] = None
    s6: Optional[int] = None

    @property
    def overrides(self) -> tuple[Optional[int], ...]:
        return (self.s1, self.s2, self.s3, self.s4, self.s5, self.s6)

    def set_overrides(self, *indices: Optional[int]) -> None:
        """Assign s1..s6 in order; missing trailing values are left untouched."""
        for name, index in zip(('s1', 's2', 's3', 's4', 's5', 's6'), indices):
            setattr(self, name, index)
