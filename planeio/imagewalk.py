# -*- coding: utf-8 -*-
"""Deterministic plane traversal over a raw plane reader.

Planes are visited in Z→C→T order (outermost Z, innermost T) regardless of
how they are rasterised on disk; the dimension order string of each image is
used to find the stored plane index of every Z/C/T position.
"""

from dataclasses import dataclass
from typing import Generator, Tuple
from loguru import logger
from planeio.planes import PlaneBuffer


@dataclass
class Plane:
    """2D plane with its position in the dataset.

    :ivar buffer: Plane buffer holding the pixel bytes
    :ivar image_idx: Image (series) index
    :ivar z_depth: Z position (0-based)
    :ivar c_channel: Channel index (0-based)
    :ivar t_time: Time point index (0-based)
    """

    buffer: PlaneBuffer
    image_idx: int
    z_depth: int
    c_channel: int
    t_time: int


def _strides(order, size_z, size_c, size_t):
    # type: (str, int, int, int) -> dict
    order = order.upper()
    if len(order) != 5 or set(order) != set("XYZCT") or order[:2] not in ("XY", "YX"):
        raise ValueError(f"Invalid dimension order: {order}")
    sizes = {"Z": size_z, "C": size_c, "T": size_t}
    strides = {}
    step = 1
    for letter in order[2:]:
        strides[letter] = step
        step *= sizes[letter]
    return strides


def plane_index(order, size_z, size_c, size_t, z, c, t):
    # type: (str, int, int, int, int, int, int) -> int
    """Rasterised plane index of position (z, c, t) for a dimension order."""
    for name, value, size in (("Z", z, size_z), ("C", c, size_c), ("T", t, size_t)):
        if not 0 <= value < size:
            raise IndexError(f"{name}={value} out of range for size {size}")
    strides = _strides(order, size_z, size_c, size_t)
    return z * strides["Z"] + c * strides["C"] + t * strides["T"]


def zct_coords(order, size_z, size_c, size_t, index):
    # type: (str, int, int, int, int) -> Tuple[int, int, int]
    """Inverse of :func:`plane_index`: (z, c, t) of a rasterised plane index."""
    total = size_z * size_c * size_t
    if not 0 <= index < total:
        raise IndexError(f"Plane index {index} out of range for {total} planes")
    strides = _strides(order, size_z, size_c, size_t)
    sizes = {"Z": size_z, "C": size_c, "T": size_t}
    coords = {letter: (index // strides[letter]) % sizes[letter] for letter in "ZCT"}
    return coords["Z"], coords["C"], coords["T"]


def iter_planes(reader, image_index=0):
    # type: (RawPlaneReader, int) -> Generator[Plane, None, None]
    """Iterate over the full planes of one image in Z→C→T order.

    :param reader: Open RawPlaneReader
    :param image_index: Image to traverse
    :return: Generator yielding Plane objects
    """
    md = reader.metadata(image_index)
    size_c = md.effective_size_c
    logger.debug(
        f"image {image_index}: Z={md.size_z}, C={size_c}, T={md.size_t}, "
        f"Y={md.size_y}, X={md.size_x}, order={md.dimension_order}"
    )
    for z in range(md.size_z):
        for c in range(size_c):
            for t in range(md.size_t):
                index = plane_index(md.dimension_order, md.size_z, size_c, md.size_t, z, c, t)
                yield Plane(
                    buffer=reader.open_plane(image_index, index),
                    image_idx=image_index,
                    z_depth=z,
                    c_channel=c,
                    t_time=t,
                )
