"""Build planeio metadata from BioIO images.

BioIO reports dimensions slowest-first (e.g. ``TCZYX``) with an optional
``S`` samples axis for RGB data. These helpers translate that view into the
axis lists and :class:`~planeio.reader.ImageMetadata` used by planeio.
"""

import sys
from pathlib import Path
from typing import List, Tuple, Union
import numpy as np
from loguru import logger
from planeio.pixels import dtype_to_pixel_type
from planeio.reader import ImageMetadata


def open_bioimage(image):
    # type: (Union[str, Path, object]) -> object
    """Open a path with BioIO; BioImage-like objects pass through unchanged."""
    if isinstance(image, (str, Path)):
        from bioio import BioImage

        return BioImage(image)
    return image


def axes_from_bioimage(image):
    # type: (Union[str, Path, object]) -> Tuple[List[str], List[int]]
    """Return the axis labels and lengths of the current scene.

    :param image: Path to a bioimage file or a BioImage-like object
    :return: Tuple of (labels, lengths), slowest axis first
    """
    img = open_bioimage(image)
    dims = img.dims
    return list(dims.order), [int(n) for n in dims.shape]


def _is_little_endian(dtype):
    # type: (np.dtype) -> bool
    order = np.dtype(dtype).byteorder
    if order in ("=", "|"):
        return sys.byteorder == "little"
    return order == "<"


def metadata_from_bioimage(image):
    # type: (Union[str, Path, object]) -> ImageMetadata
    """Describe the current scene of a bioimage as ImageMetadata.

    Args:
        image: Path to a bioimage file or a BioImage-like object exposing
            ``dims.order``, ``dims.shape`` and ``dtype``

    Returns:
        ImageMetadata with sizes, pixel type and dimension order filled in

    Raises:
        ValueError: If the image has no X or Y axis
    """
    img = open_bioimage(image)
    order = img.dims.order.upper()
    sizes = dict(zip(order, (int(n) for n in img.dims.shape)))
    if "X" not in sizes or "Y" not in sizes:
        raise ValueError(f"Image dimensions {order} lack X or Y")

    samples = sizes.get("S", 1)
    # OME orders list the fastest varying axis first
    zct = [letter for letter in reversed(order) if letter in "ZCT"]
    zct += [letter for letter in "ZCT" if letter not in zct]
    dimension_order = "XY" + "".join(zct)

    md = ImageMetadata(
        size_x=sizes["X"],
        size_y=sizes["Y"],
        size_z=sizes.get("Z", 1),
        size_c=sizes.get("C", 1) * samples,
        size_t=sizes.get("T", 1),
        pixel_type=dtype_to_pixel_type(img.dtype),
        rgb_channel_count=samples,
        interleaved=samples > 1 and order.endswith("S"),
        little_endian=_is_little_endian(img.dtype),
        dimension_order=dimension_order,
    )
    logger.debug(f"bioimage {order} {tuple(sizes.values())} -> {md}")
    return md
