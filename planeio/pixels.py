"""Pixel type table shared by readers and plane buffers."""

import numpy as np
from planeio.errors import UnsupportedPixelTypeError

# OME pixel type names keyed to their numpy dtypes
PIXEL_TYPES = {
    "uint8": np.dtype("uint8"),
    "int8": np.dtype("int8"),
    "uint16": np.dtype("uint16"),
    "int16": np.dtype("int16"),
    "uint32": np.dtype("uint32"),
    "int32": np.dtype("int32"),
    "float": np.dtype("float32"),
    "double": np.dtype("float64"),
}


def pixel_type_to_dtype(pixel_type, little_endian=False):
    # type: (str, bool) -> np.dtype
    """Convert an OME pixel type name to a numpy dtype with explicit byte order.

    Args:
        pixel_type: OME PixelsType string (e.g. 'uint16', 'float')
        little_endian: Whether stored samples are little-endian

    Returns:
        numpy dtype with '<' or '>' byte order (single-byte types stay '|')
    """
    try:
        dtype = PIXEL_TYPES[pixel_type.lower()]
    except KeyError:
        raise UnsupportedPixelTypeError(f"Unsupported pixel type: {pixel_type}") from None
    return dtype.newbyteorder("<" if little_endian else ">")


def dtype_to_pixel_type(dtype):
    # type: (np.dtype) -> str
    """Convert a numpy dtype to its OME pixel type name, ignoring byte order."""
    native = np.dtype(dtype).newbyteorder("=")
    for name, candidate in PIXEL_TYPES.items():
        if candidate == native:
            return name
    raise UnsupportedPixelTypeError(f"Unsupported dtype: {dtype}")


def bytes_per_pixel(pixel_type):
    # type: (str) -> int
    """Number of bytes one sample of ``pixel_type`` occupies."""
    return pixel_type_to_dtype(pixel_type).itemsize
