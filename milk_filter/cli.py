import logging
import sys
import click
from pathlib import Path
from typing import Optional
from .core.config import MilkConfig
from .core.pipeline import milk_image
from .core.utils import get_random_filename

OVERRIDE = click.IntRange(0, 2)

@click.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--alt',
    is_flag=True,
    help='Use the alternative palette (#5C243C / #CB2B2B) and its lower mid thresholds.'
)
@click.option(
    '--pointism',
    is_flag=True,
    help='Pointillism: randomized buckets keep their likely color only 70%% of the time.'
)
@click.option(
    '--disable',
    is_flag=True,
    help='Skip the color filter and only simulate compression artifacts.'
)
@click.option(
    '--comp',
    type=click.IntRange(0, 100),
    default=0,
    show_default=True,
    help='Compression artifact strength (0 disables quantization and blocks).'
)
@click.option(
    '--no-quant',
    is_flag=True,
    help='Disable the quantization pass.'
)
@click.option(
    '--no-block',
    is_flag=True,
    help='Disable the blockiness pass.'
)
@click.option(
    '--block-size',
    type=click.IntRange(0, 64),
    default=0,
    show_default=True,
    help='Width of averaged pixel blocks. 0 derives it from --comp.'
)
@click.option(
    '--eff',
    type=click.IntRange(0, 1),
    default=0,
    show_default=True,
    help='Tie-break direction between neighbouring buckets.'
)
@click.option('--s1', type=OVERRIDE, default=None, help='Palette index (0-2) for the darkest bucket.')
@click.option('--s2', type=OVERRIDE, default=None, help='Palette index for bucket 2.')
@click.option('--s3', type=OVERRIDE, default=None, help='Palette index for bucket 3.')
@click.option('--s4', type=OVERRIDE, default=None, help='Palette index for bucket 4.')
@click.option('--s5', type=OVERRIDE, default=None, help='Palette index for bucket 5.')
@click.option('--s6', type=OVERRIDE, default=None, help='Palette index for the brightest bucket.')
@click.option(
    '--workers',
    type=click.IntRange(1, None),
    default=None,
    help='Worker threads per pass. Defaults to the CPU count.'
)
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help='Output file path. Defaults to automatic naming.'
)
@click.option(
    '--random-name',
    is_flag=True,
    help='Save as filt_<random hex>.png next to the input (ignored with --output).'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Log pipeline steps to stderr.'
)
def main(
    image: str,
    alt: bool,
    pointism: bool,
    disable: bool,
    comp: int,
    no_quant: bool,
    no_block: bool,
    block_size: int,
    eff: int,
    s1: Optional[int],
    s2: Optional[int],
    s3: Optional[int],
    s4: Optional[int],
    s5: Optional[int],
    s6: Optional[int],
    workers: Optional[int],
    output: Optional[str],
    random_name: bool,
    verbose: bool
) -> None:
    """Posterize an image into a three-color milk palette.

    IMAGE is the path to the input image file (PNG or JPG).

    Every pixel is sorted into one of six brightness buckets and painted
    with one of three palette colors. Buckets between two colors pick one
    using a per-row seeded random stream, so output is reproducible.

    Processing order:

    - --comp > 0: quantize channel levels (unless --no-quant), then average
      horizontal pixel blocks (unless --no-block)

    - color filter (unless --disable), with --s1 .. --s6 pinning buckets
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    config = MilkConfig(
        enabled=not disable,
        alt=alt,
        pointism=pointism,
        comp=comp,
        quant=not no_quant,
        block=not no_block,
        block_size=block_size,
        eff=eff,
    )
    config.set_overrides(s1, s2, s3, s4, s5, s6)

    output_path: Optional[Path] = Path(output) if output else None
    if output_path is None and random_name:
        output_path = get_random_filename(Path(image).parent)

    try:
        saved = milk_image(image, config, output_path=output_path, max_workers=workers)
        click.secho(f"✓ Filtered image saved to: {saved}", fg='green')
    except (ValueError, OSError) as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
