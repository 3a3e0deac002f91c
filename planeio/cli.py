"""CLI interface for planeio."""

import hashlib
import sys
from dataclasses import replace
from pathlib import Path
import click
from loguru import logger
from planeio import bioio_meta, config
from planeio.axes import compress_axes
from planeio.errors import PlaneIOError
from planeio.imagewalk import iter_planes
from planeio.pixels import PIXEL_TYPES
from planeio.reader import ImageMetadata, RawPlaneReader
from planeio.tiling import default_tile_height, optimal_tile


def _raw_options(func):
    """Options describing a raw pixel file."""
    options = [
        click.option("--width", "-x", type=int, required=True, help="Plane width"),
        click.option("--height", "-y", type=int, required=True, help="Plane height"),
        click.option(
            "--pixel-type",
            type=click.Choice(sorted(PIXEL_TYPES)),
            default="uint8",
            show_default=True,
        ),
        click.option("--rgb", type=int, default=1, show_default=True, help="Samples per pixel"),
        click.option("--interleaved/--planar", default=False, show_default=True),
        click.option("--little-endian", is_flag=True, help="Samples are little-endian"),
        click.option("--pad", type=int, default=0, show_default=True, help="Scanline pad"),
        click.option("--offset", type=int, default=0, show_default=True, help="Header bytes"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Log level for stderr output (default: PLANEIO_LOG_LEVEL or WARNING)",
)
def cli(log_level):
    """planeio - Plane region access and cache tiling tools."""
    logger.remove()
    logger.add(sys.stderr, level=(log_level or config.settings.log_level).upper())


@cli.command()
@click.argument("plane_width", type=int)
@click.argument("plane_height", type=int)
@click.option("--bpp", type=int, default=1, show_default=True, help="Bytes per pixel")
@click.option(
    "--tile",
    "proposed",
    type=(int, int),
    default=(0, 0),
    show_default=True,
    help="Proposed tile width and height",
)
def tile(plane_width, plane_height, bpp, proposed):
    """Compute the cache cell size for a PLANE_WIDTH x PLANE_HEIGHT plane."""
    cell = optimal_tile(plane_width, plane_height, bpp, proposed[0], proposed[1])
    click.echo(f"{cell.width}x{cell.height}")


@cli.command()
@click.argument("axes", nargs=-1, required=True)
def axes(axes):
    """
    Compress AXES into a five dimensional XYZCT order.

    Each axis is given as LABEL:LENGTH, e.g. ``X:512 Y:512 U:5 Z:10``.
    """
    labels = []
    lengths = []
    for item in axes:
        label, _, length = item.partition(":")
        try:
            lengths.append(int(length))
        except ValueError:
            click.echo(f"✗ Invalid axis {item!r}, expected LABEL:LENGTH", err=True)
            sys.exit(2)
        labels.append(label)

    result = compress_axes(labels, lengths)
    if result is None:
        click.echo("✗ Axes cannot be compressed into XYZCT", err=True)
        sys.exit(1)
    click.echo(result.order)
    click.echo(" ".join(f"{letter}={n}" for letter, n in zip(result.order, result.lengths)))


@cli.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_raw_options
@click.option("--plane", "plane_index", type=int, default=0, show_default=True)
@click.option("--region", type=(int, int, int, int), default=None, help="X Y W H")
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True
)
def region(input, width, height, pixel_type, rgb, interleaved, little_endian, pad, offset, plane_index, region, output):
    """Extract a plane region from a raw pixel file INPUT."""
    md = ImageMetadata(
        size_x=width,
        size_y=height,
        size_c=rgb,
        pixel_type=pixel_type,
        rgb_channel_count=rgb,
        interleaved=interleaved,
        little_endian=little_endian,
    )
    # Every whole plane the file holds is addressable
    stored = (width + pad) * height * md.bytes_per_pixel * rgb
    md = replace(md, size_z=max((input.stat().st_size - offset) // stored, 1))
    x, y, w, h = region if region else (0, 0, None, None)
    try:
        with RawPlaneReader(input, md, header_offset=offset, scanline_pad=pad) as reader:
            plane = reader.open_plane(0, plane_index, x, y, w, h)
    except (PlaneIOError, ValueError, IndexError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)
    output.write_bytes(plane.bytes)
    click.echo(f"✓ Wrote {len(plane.bytes)} bytes to {output}")


@cli.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_raw_options
@click.option("--sizes", type=(int, int, int), default=(1, 1, 1), show_default=True, help="Z C T")
@click.option("--order", default="XYZCT", show_default=True, help="Dimension order")
def walk(input, width, height, pixel_type, rgb, interleaved, little_endian, pad, offset, sizes, order):
    """List the planes of raw pixel file INPUT in Z→C→T order with SHA1 digests."""
    size_z, size_c, size_t = sizes
    md = ImageMetadata(
        size_x=width,
        size_y=height,
        size_z=size_z,
        size_c=size_c * rgb,
        size_t=size_t,
        pixel_type=pixel_type,
        rgb_channel_count=rgb,
        interleaved=interleaved,
        little_endian=little_endian,
        dimension_order=order.upper(),
    )
    try:
        with RawPlaneReader(input, md, header_offset=offset, scanline_pad=pad) as reader:
            for plane in iter_planes(reader):
                digest = hashlib.sha1(plane.buffer.bytes).hexdigest()
                click.echo(
                    f"z={plane.z_depth} c={plane.c_channel} t={plane.t_time} {digest}"
                )
    except (PlaneIOError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def describe(input):
    """
    Describe the current scene of bioimage file INPUT.

    Prints plane geometry, the canonical XYZCT order of its axes and the
    cache cell planeio would use for it.
    """
    try:
        image = bioio_meta.open_bioimage(input)
        md = bioio_meta.metadata_from_bioimage(image)
        labels, lengths = bioio_meta.axes_from_bioimage(image)
    except Exception as e:
        logger.error(f"Failed to read {input.name}: {e}")
        click.echo(f"✗ {input.name}: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"✓ {input.name}: {md.size_x}x{md.size_y} {md.pixel_type}, "
        f"Z={md.size_z} C={md.effective_size_c} T={md.size_t}, {md.plane_count} planes"
    )
    if md.rgb_channel_count > 1:
        layout = "interleaved" if md.interleaved else "planar"
        click.echo(f"  → RGB {md.rgb_channel_count} samples, {layout}")
    compressed = compress_axes(labels, lengths)
    if compressed is None:
        click.echo(f"  ⚠ Axes {''.join(labels)} cannot be compressed into XYZCT")
    else:
        sizes = " ".join(f"{k}={n}" for k, n in zip(compressed.order, compressed.lengths))
        click.echo(f"  → Order {compressed.order} ({sizes})")
    strip = default_tile_height(
        md.size_x, md.size_y, md.bytes_per_pixel, md.rgb_channel_count
    )
    cell = optimal_tile(md.size_x, md.size_y, md.bytes_per_pixel, md.size_x, strip)
    click.echo(f"  → Cell {cell.width}x{cell.height}")


if __name__ == "__main__":
    cli()
