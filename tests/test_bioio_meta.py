from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from planeio.axes import compress_axes
from planeio.bioio_meta import axes_from_bioimage, metadata_from_bioimage


def fake_image(order: str, shape: tuple, dtype: str = "uint16"):
    return SimpleNamespace(dims=SimpleNamespace(order=order, shape=shape), dtype=np.dtype(dtype))


def test_metadata_from_tczyx():
    md = metadata_from_bioimage(fake_image("TCZYX", (2, 3, 4, 10, 20), ">u2"))
    assert (md.size_x, md.size_y, md.size_z, md.size_c, md.size_t) == (20, 10, 4, 3, 2)
    assert md.pixel_type == "uint16"
    assert md.dimension_order == "XYZCT"
    assert not md.little_endian
    assert md.plane_count == 24


def test_metadata_from_rgb_samples():
    md = metadata_from_bioimage(fake_image("TCZYXS", (1, 1, 1, 8, 8, 3), "uint8"))
    assert md.rgb_channel_count == 3
    assert md.size_c == 3
    assert md.interleaved
    assert md.plane_count == 1


def test_metadata_dimension_order_from_layout():
    md = metadata_from_bioimage(fake_image("ZTYX", (5, 6, 4, 4), "<f4"))
    assert md.dimension_order == "XYTZC"
    assert md.pixel_type == "float"
    assert md.little_endian


def test_missing_spatial_axis():
    with pytest.raises(ValueError):
        metadata_from_bioimage(fake_image("TCZ", (1, 2, 3)))


def test_axes_feed_compression():
    labels, lengths = axes_from_bioimage(fake_image("TQYX", (2, 5, 8, 8)))
    assert labels == ["T", "Q", "Y", "X"]
    result = compress_axes(labels, lengths)
    assert result.order == "TZYXC"
    assert result.lengths == (2, 5, 8, 8, 1)
