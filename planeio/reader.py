"""Plane reader over raw, uncompressed pixel files.

The reader does not parse any file format. Callers describe each image with
:class:`ImageMetadata` and the reader works out where every plane starts,
then hands the positioned cursor to the region extractor.
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union
import numpy as np
from loguru import logger
from planeio.errors import IncompatiblePlaneError
from planeio.pixels import pixel_type_to_dtype
from planeio.planes import ArrayPlane, ByteArrayPlane, PlaneDescriptor, Region, cast_plane
from planeio.region import allocate_plane, read_region
from planeio.stream import ByteCursor
from planeio.tiling import TileGeometry, default_tile_height, optimal_tile


@dataclass(frozen=True)
class ImageMetadata:
    """Core metadata for one image (series) of a dataset.

    :ivar size_x: Plane width
    :ivar size_y: Plane height
    :ivar size_z: Number of focal planes
    :ivar size_c: Number of channels, including RGB samples
    :ivar size_t: Number of time points
    :ivar pixel_type: OME pixel type name
    :ivar rgb_channel_count: Channels stored together in every plane
    :ivar interleaved: True if RGB samples are interleaved per pixel
    :ivar little_endian: Byte order of stored samples
    :ivar dimension_order: Rasterisation order of planes, e.g. 'XYZCT'
    """

    size_x: int
    size_y: int
    size_z: int = 1
    size_c: int = 1
    size_t: int = 1
    pixel_type: str = "uint8"
    rgb_channel_count: int = 1
    interleaved: bool = False
    little_endian: bool = False
    dimension_order: str = "XYZCT"

    @property
    def dtype(self):
        # type: () -> np.dtype
        return pixel_type_to_dtype(self.pixel_type, self.little_endian)

    @property
    def bytes_per_pixel(self):
        # type: () -> int
        return self.dtype.itemsize

    @property
    def effective_size_c(self):
        # type: () -> int
        """Number of channel planes once RGB samples are grouped."""
        return max(self.size_c // max(self.rgb_channel_count, 1), 1)

    @property
    def plane_count(self):
        # type: () -> int
        return self.size_z * self.effective_size_c * self.size_t

    @property
    def descriptor(self):
        # type: () -> PlaneDescriptor
        return PlaneDescriptor(
            width=self.size_x,
            height=self.size_y,
            bytes_per_pixel=self.bytes_per_pixel,
            channel_count=self.rgb_channel_count,
            interleaved=self.interleaved,
        )


class RawPlaneReader:
    """Open planes and sub-regions of planes stored back to back in a file.

    Images follow each other, each plane of an image occupies
    ``(size_x + scanline_pad) * size_y * bytes_per_pixel * rgb_channel_count``
    bytes, and the first plane starts at ``header_offset``.

    Reads go through one cursor guarded by a lock, so a reader may be shared
    between threads although reads are serialised.

    Args:
        source: Path to the pixel file or an open binary stream
        images: Metadata for each image in the file
        header_offset: Bytes before the first plane
        scanline_pad: Padding pixels stored after every row
        plane_class: ByteArrayPlane or ArrayPlane, the kind of buffer returned
    """

    def __init__(
        self,
        source,  # type: Union[str, Path, object]
        images,  # type: Union[ImageMetadata, Sequence[ImageMetadata]]
        header_offset=0,  # type: int
        scanline_pad=0,  # type: int
        plane_class=ByteArrayPlane,  # type: type
    ):
        if isinstance(images, ImageMetadata):
            images = [images]
        self.images = list(images)  # type: List[ImageMetadata]
        self.header_offset = header_offset
        self.scanline_pad = scanline_pad
        self.plane_class = plane_class
        self._lock = threading.Lock()
        self._owns_stream = isinstance(source, (str, Path))
        if self._owns_stream:
            self.path = Path(source)  # type: Optional[Path]
            self._stream = open(self.path, "rb")
        else:
            self.path = None
            self._stream = source
        self._cursor = ByteCursor(self._stream)
        logger.debug(
            f"{self.path or 'stream'} - raw reader with {len(self.images)} image(s)"
        )

    # -- Metadata --

    @property
    def image_count(self):
        # type: () -> int
        return len(self.images)

    def metadata(self, image_index=0):
        # type: (int) -> ImageMetadata
        return self.images[image_index]

    def plane_count(self, image_index=0):
        # type: (int) -> int
        return self.images[image_index].plane_count

    def stored_plane_bytes(self, image_index=0):
        # type: (int) -> int
        """Bytes one stored plane of the image occupies, padding included."""
        md = self.images[image_index]
        return (
            (md.size_x + self.scanline_pad)
            * md.size_y
            * md.bytes_per_pixel
            * md.rgb_channel_count
        )

    def plane_offset(self, image_index, plane_index):
        # type: (int, int) -> int
        """Absolute byte offset of a plane in the source."""
        offset = self.header_offset
        for i in range(image_index):
            offset += self.stored_plane_bytes(i) * self.plane_count(i)
        return offset + plane_index * self.stored_plane_bytes(image_index)

    # -- Tiling --

    def optimal_tile_width(self, image_index=0):
        # type: (int) -> int
        return self.images[image_index].size_x

    def optimal_tile_height(self, image_index=0):
        # type: (int) -> int
        md = self.images[image_index]
        return default_tile_height(
            md.size_x, md.size_y, md.bytes_per_pixel, md.rgb_channel_count
        )

    def optimal_cell(self, image_index=0, tile_width=None, tile_height=None):
        # type: (int, Optional[int], Optional[int]) -> TileGeometry
        """Cache cell for the image, grown from the given or native tile size."""
        md = self.images[image_index]
        if tile_width is None:
            tile_width = self.optimal_tile_width(image_index)
        if tile_height is None:
            tile_height = self.optimal_tile_height(image_index)
        return optimal_tile(
            md.size_x, md.size_y, md.bytes_per_pixel, tile_width, tile_height
        )

    # -- Reading --

    def open_plane(self, image_index, plane_index, x=0, y=0, w=None, h=None, plane=None):
        """Read a plane, or a rectangle of it.

        :param image_index: Image (series) index
        :param plane_index: Plane index within the image
        :param x: Left edge of the region
        :param y: Top edge of the region
        :param w: Region width, full plane width when None
        :param h: Region height, full plane height when None
        :param plane: Existing buffer to fill; its own region is read
        :return: Filled plane buffer of the reader's plane class
        :raises IndexError: If image or plane index is out of range
        :raises IncompatiblePlaneError: If ``plane`` has another class or plane geometry
        :raises ValueError: If the region does not lie inside the plane
        :raises RegionTooLargeError: If the region cannot be held in one buffer
        """
        md = self.images[image_index]
        if not 0 <= plane_index < md.plane_count:
            raise IndexError(
                f"Plane index {plane_index} out of range for {md.plane_count} planes"
            )
        descriptor = md.descriptor

        if plane is not None:
            plane = cast_plane(plane, self.plane_class)
            if plane.descriptor != descriptor:
                raise IncompatiblePlaneError(
                    f"Plane built for {plane.descriptor}, image {image_index} stores {descriptor}"
                )
            region = plane.region
        else:
            region = Region(
                x,
                y,
                descriptor.width if w is None else w,
                descriptor.height if h is None else h,
            )
        if not region.fits(descriptor):
            raise ValueError(
                f"Region {region} outside {descriptor.width}x{descriptor.height} plane"
            )
        if plane is None:
            dtype = md.dtype if self.plane_class is ArrayPlane else None
            plane = allocate_plane(descriptor, region, dtype=dtype)

        with self._lock:
            self._cursor.seek(self.plane_offset(image_index, plane_index))
            return read_region(self._cursor, plane, scanline_pad=self.scanline_pad)

    def close(self):
        if self._owns_stream and self._stream is not None:
            self._stream.close()
        self._stream = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
