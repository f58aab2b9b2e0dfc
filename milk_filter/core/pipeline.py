import io
import logging
from pathlib import Path
from typing import Optional, Union
from PIL import Image
import numpy as np
import numpy.typing as npt

from ..constants import INPUT_FORMATS, ImageState, OutputFormat
from ..processing.compression import simulate_compression
from ..processing.filters.milk import milk_filter
from .config import MilkConfig
from .utils import get_output_filename, output_format

LOGGER = logging.getLogger("milk_filter.pipeline")


class DecodeError(ValueError):
    """Input bytes are not an image Pillow can decode."""


def decode_rgb(data: bytes) -> npt.NDArray[np.uint8]:
    """
    Decode PNG or JPEG bytes into an RGB24 array.

    Raises:
        DecodeError: if the bytes are malformed or in any other encoding.
    """
    try:
        with Image.open(io.BytesIO(data), formats=INPUT_FORMATS) as img:
            return np.array(img.convert('RGB'), dtype=np.uint8)
    except Exception as e:
        raise DecodeError(f"Failed to open image: {e}") from e


def process_array(
    source: npt.NDArray[np.uint8],
    config: MilkConfig,
    max_workers: Optional[int] = None
) -> npt.NDArray[np.uint8]:
    """
    Run the full transform on a copy of `source` and return the copy.

    Order: quantization, blockiness, then the color-bucket filter.
    """
    img = np.array(source, dtype=np.uint8, copy=True, order='C')

    simulate_compression(
        img,
        config.comp,
        quant=config.quant,
        block=config.block,
        block_size=config.block_size,
        max_workers=max_workers
    )

    if config.enabled:
        milk_filter(
            img,
            alt=config.alt,
            pointism=config.pointism,
            eff=config.eff,
            overrides=config.overrides,
            max_workers=max_workers
        )

    return img


class MilkImage:
    """
    Holds a decoded source image, the live configuration and the last
    processed result.

    The source buffer is never modified, so the image can be reprocessed
    under a new configuration without decoding again.
    """

    def __init__(self, config: Optional[MilkConfig] = None, max_workers: Optional[int] = None):
        self.source: Optional[npt.NDArray[np.uint8]] = None
        self.processed: Optional[npt.NDArray[np.uint8]] = None
        self.max_workers = max_workers
        self._config = config if config is not None else MilkConfig()

    @property
    def config(self) -> MilkConfig:
        return self._config

    @property
    def state(self) -> ImageState:
        if self.source is None:
            return 'empty'
        if self.processed is None:
            return 'loaded'
        return 'processed'

    def load(self, data: bytes) -> None:
        """
        Decode `data` and make it the new source.

        On failure a DecodeError is raised and the previous source and result
        are kept.
        """
        source = decode_rgb(data)
        self.source = source
        self.processed = None
        LOGGER.debug("Loaded %dx%d image", source.shape[1], source.shape[0])

    def load_image(self, img: Image.Image) -> None:
        """Use an already decoded PIL image as the new source."""
        if img.mode != 'RGB':
            img = img.convert('RGB')
        self.source = np.array(img, dtype=np.uint8)
        self.processed = None

    def process(self) -> Optional[npt.NDArray[np.uint8]]:
        """Transform a copy of the source with the current configuration."""
        if self.source is None:
            LOGGER.warning("process() called before an image was loaded")
            return None

        LOGGER.debug("Processing with %s", self._config)
        self.processed = process_array(self.source, self._config, self.max_workers)
        return self.processed

    def to_image(self) -> Optional[Image.Image]:
        if self.processed is None:
            return None
        return Image.fromarray(self.processed)

    def encode(self, format: OutputFormat = 'PNG') -> bytes:
        """Encode the processed result. Raises RuntimeError if there is none."""
        result = self.to_image()
        if result is None:
            raise RuntimeError("No processed image to encode")

        buf = io.BytesIO()
        options = {"quality": 95} if format == "JPEG" else {}
        result.save(buf, format, **options)
        return buf.getvalue()


def apply_milk(
    img: Image.Image,
    config: Optional[MilkConfig] = None,
    max_workers: Optional[int] = None
) -> Image.Image:
    """
    Apply compression artifacts and the milk color filter to a PIL Image.
    """
    # Convert to RGB if needed
    if img.mode != 'RGB':
        img = img.convert('RGB')

    result = process_array(np.array(img), config if config is not None else MilkConfig(), max_workers)
    return Image.fromarray(result)


def milk_image(
    input_path: Union[str, Path],
    config: Optional[MilkConfig] = None,
    output_path: Optional[Union[str, Path]] = None,
    max_workers: Optional[int] = None
) -> Path:
    """
    Filter an image file and save the result.

    Args:
        input_path: Path to input image file
        config: Filter settings. Defaults to MilkConfig().
        output_path: Optional path for output file. If None, generated from input filename.
        max_workers: Worker threads for each pass.

    Returns:
        Path to output file

    Raises:
        DecodeError: if the input is not a PNG or JPEG image.
        ValueError: if the output suffix is not .png, .jpg or .jpeg.
    """
    final_output_path = Path(output_path) if output_path is not None else get_output_filename(input_path)
    # Reject a bad output name before any work is done
    fmt = output_format(final_output_path)

    milk = MilkImage(config, max_workers=max_workers)
    milk.load(Path(input_path).read_bytes())
    milk.process()
    final_output_path.write_bytes(milk.encode(fmt))

    LOGGER.info("Saved %s", final_output_path)
    return final_output_path
