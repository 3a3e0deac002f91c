"""Extraction of rectangular regions from stored image planes.

The cursor handed to :func:`read_region` must sit at the first byte of the
plane. Three read strategies are used, from most to least specific:

- full plane: one contiguous read
- full-width rows: skip to row ``y`` and read ``h`` whole rows (per channel
  when planar)
- general rectangle: row by row, skipping the columns left and right of the
  region and honouring any scanline padding

Whatever path is taken, the cursor ends right after the last byte read.
"""

from loguru import logger
from planeio import config
from planeio.errors import RegionTooLargeError
from planeio.planes import ByteArrayPlane, ArrayPlane


def region_byte_count(descriptor, region, max_bytes=None):
    # type: (PlaneDescriptor, Region, int | None) -> int
    """Size in bytes of the buffer holding ``region``.

    :param descriptor: Plane the region belongs to
    :param region: Requested rectangle
    :param max_bytes: Largest permitted single read (defaults to settings)
    :return: ``w * h * bytes_per_pixel * channel_count``
    :raises RegionTooLargeError: If the buffer would exceed ``max_bytes``
    """
    limit = config.settings.max_region_bytes if max_bytes is None else max_bytes
    nbytes = region.w * region.h * descriptor.bytes_per_pixel * descriptor.channel_count
    if nbytes < 0 or nbytes > limit:
        raise RegionTooLargeError(nbytes, limit)
    return nbytes


def allocate_plane(descriptor, region, dtype=None, max_bytes=None):
    """Allocate a buffer for ``region``.

    Args:
        descriptor: Plane the region belongs to
        region: Requested rectangle
        dtype: numpy dtype for an ArrayPlane; a ByteArrayPlane when None
        max_bytes: Largest permitted single read (defaults to settings)

    Returns:
        Empty plane buffer sized for the region

    Raises:
        RegionTooLargeError: If the region is over the limit or cannot be allocated
    """
    limit = config.settings.max_region_bytes if max_bytes is None else max_bytes
    nbytes = region_byte_count(descriptor, region, max_bytes=limit)
    try:
        if dtype is None:
            return ByteArrayPlane(descriptor, region)
        return ArrayPlane(descriptor, region, dtype)
    except MemoryError as e:
        raise RegionTooLargeError(nbytes, limit) from e


def read_region(cursor, plane, scanline_pad=0):
    """Fill ``plane`` with its region's bytes read from ``cursor``.

    Args:
        cursor: ByteCursor positioned at the start of the stored plane
        plane: PlaneBuffer whose descriptor and region drive the read
        scanline_pad: Extra pixels stored after every row

    Returns:
        The same plane, filled
    """
    d = plane.descriptor
    r = plane.region
    out = plane.data
    c = d.channel_count
    bpp = d.bytes_per_pixel

    if r.is_full(d) and scanline_pad == 0:
        logger.debug(f"Reading full plane {d.width}x{d.height}")
        cursor.read_into(out, 0, r.w * r.h * bpp * c)

    elif r.x == 0 and r.w == d.width and scanline_pad == 0:
        logger.debug(f"Reading {r.h} full-width rows from y={r.y}")
        if d.interleaved:
            cursor.skip(r.y * r.w * bpp * c)
            cursor.read_into(out, 0, r.h * r.w * bpp * c)
        else:
            row_len = r.w * bpp
            for channel in range(c):
                cursor.skip(r.y * row_len)
                cursor.read_into(out, channel * r.h * row_len, r.h * row_len)
                if channel < c - 1:
                    cursor.skip((d.height - r.y - r.h) * row_len)

    else:
        scanline_width = d.width + scanline_pad
        logger.debug(
            f"Reading region {r.w}x{r.h} at ({r.x}, {r.y}), scanline width {scanline_width}"
        )
        if d.interleaved:
            pixel = bpp * c
            cursor.skip(r.y * scanline_width * pixel)
            for row in range(r.h):
                cursor.skip(r.x * pixel)
                cursor.read_into(out, row * r.w * pixel, r.w * pixel)
                if row < r.h - 1:
                    cursor.skip(pixel * (scanline_width - r.w - r.x))
        else:
            for channel in range(c):
                cursor.skip(r.y * scanline_width * bpp)
                for row in range(r.h):
                    cursor.skip(r.x * bpp)
                    cursor.read_into(
                        out, channel * r.w * r.h * bpp + row * r.w * bpp, r.w * bpp
                    )
                    if row < r.h - 1 or channel < c - 1:
                        cursor.skip(bpp * (scanline_width - r.w - r.x))
                if channel < c - 1:
                    cursor.skip(scanline_width * bpp * (d.height - r.y - r.h))

    return plane


def extract_region(cursor, descriptor, region, scanline_pad=0, max_bytes=None):
    # type: (ByteCursor, PlaneDescriptor, Region, int, int | None) -> bytes
    """Read ``region`` from the plane under ``cursor`` and return its bytes."""
    plane = allocate_plane(descriptor, region, max_bytes=max_bytes)
    return read_region(cursor, plane, scanline_pad=scanline_pad).bytes
