from itertools import count
from pathlib import Path
from typing import Optional, Union

from ..constants import OUTPUT_SUFFIXES, OutputFormat
from ..processing.rng import random_u64


def get_output_filename(input_path: Union[str, Path]) -> Path:
    """
    Next free `<stem>-milk[-N]<suffix>` path beside the input. Inputs without
    a known image suffix get `.png`.
    """
    path = Path(input_path)
    suffix = path.suffix if path.suffix.lower() in OUTPUT_SUFFIXES else ".png"
    candidates = (
        path.with_name(f"{path.stem}-milk{'' if n == 0 else f'-{n}'}{suffix}")
        for n in count()
    )
    return next(c for c in candidates if not c.exists())


def get_random_filename(directory: Union[str, Path] = '.', file_id: Optional[int] = None) -> Path:
    """Export name of the form filt_<16 hex digits>.png."""
    if file_id is None:
        file_id = random_u64()
    return Path(directory) / f"filt_{file_id:016x}.png"


def output_format(path: Union[str, Path]) -> OutputFormat:
    """
    Encoding implied by an output path's suffix.

    Raises:
        ValueError: for suffixes other than .png, .jpg and .jpeg.
    """
    suffix = Path(path).suffix.lower()
    try:
        return OUTPUT_SUFFIXES[suffix]
    except KeyError:
        raise ValueError(f"Unsupported output extension '{suffix}' (use .png, .jpg or .jpeg)") from None
