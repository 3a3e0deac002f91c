from __future__ import annotations

import hashlib
from types import SimpleNamespace

import numpy as np
from click.testing import CliRunner

from planeio import bioio_meta
from planeio.cli import cli


def test_tile_command():
    runner = CliRunner()
    result = runner.invoke(cli, ["tile", "4096", "4096", "--bpp", "2", "--tile", "512", "512"])
    assert result.exit_code == 0
    assert result.output.strip() == "2048x512"


def test_tile_command_defaults_to_plane():
    result = CliRunner().invoke(cli, ["tile", "13", "17"])
    assert result.output.strip() == "13x17"


def test_axes_command():
    result = CliRunner().invoke(cli, ["axes", "Y:6", "U:5", "Z:2", "U:1"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "YXZCT"
    assert lines[1] == "Y=6 X=5 Z=2 C=1 T=1"


def test_axes_command_failure():
    result = CliRunner().invoke(cli, ["axes", "X:2", "Y:2", "Z:2", "C:2", "T:2", "U:3"])
    assert result.exit_code == 1


def test_axes_command_bad_argument():
    result = CliRunner().invoke(cli, ["axes", "X:two"])
    assert result.exit_code == 2


def test_region_command(tmp_path):
    data = np.arange(2 * 6 * 5, dtype=np.uint8).reshape(2, 6, 5)
    src = tmp_path / "planes.raw"
    src.write_bytes(data.tobytes())
    out = tmp_path / "region.bin"
    result = CliRunner().invoke(
        cli,
        ["region", str(src), "-x", "5", "-y", "6", "--plane", "1", "--region", "1", "2", "3", "2", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == data[1, 2:4, 1:4].tobytes()


def test_region_command_out_of_bounds(tmp_path):
    src = tmp_path / "planes.raw"
    src.write_bytes(bytes(30))
    result = CliRunner().invoke(
        cli,
        ["region", str(src), "-x", "5", "-y", "6", "--region", "3", "0", "5", "1", "-o", str(tmp_path / "o")],
    )
    assert result.exit_code == 1


def test_walk_command(tmp_path):
    data = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    src = tmp_path / "stack.raw"
    src.write_bytes(data.tobytes())
    result = CliRunner().invoke(
        cli, ["walk", str(src), "-x", "4", "-y", "3", "--sizes", "2", "1", "1"]
    )
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == f"z=0 c=0 t=0 {hashlib.sha1(data[0].tobytes()).hexdigest()}"
    assert lines[1] == f"z=1 c=0 t=0 {hashlib.sha1(data[1].tobytes()).hexdigest()}"


def fake_bioimage(order, shape, dtype="uint16"):
    return SimpleNamespace(dims=SimpleNamespace(order=order, shape=shape), dtype=np.dtype(dtype))


def test_describe_command(tmp_path, monkeypatch):
    src = tmp_path / "cells.tif"
    src.write_bytes(b"")
    opened = []

    def open_image(path):
        opened.append(path)
        return fake_bioimage("TCZYX", (2, 3, 4, 10, 20))

    monkeypatch.setattr(bioio_meta, "open_bioimage", open_image)
    result = CliRunner().invoke(cli, ["describe", str(src)])
    assert result.exit_code == 0, result.output
    assert opened == [src]
    lines = result.output.splitlines()
    assert lines[0] == "✓ cells.tif: 20x10 uint16, Z=4 C=3 T=2, 24 planes"
    assert lines[1] == "  → Order TCZYX (T=2 C=3 Z=4 Y=10 X=20)"
    assert lines[2] == "  → Cell 20x10"


def test_describe_folds_extra_axes(tmp_path, monkeypatch):
    src = tmp_path / "mosaic.czi"
    src.write_bytes(b"")
    monkeypatch.setattr(
        bioio_meta, "open_bioimage", lambda path: fake_bioimage("MTYX", (6, 2, 8, 8), "uint8")
    )
    result = CliRunner().invoke(cli, ["describe", str(src)])
    assert result.exit_code == 0, result.output
    assert "  → Order ZTYXC (Z=6 T=2 Y=8 X=8 C=1)" in result.output.splitlines()


def test_describe_unreadable_file(tmp_path, monkeypatch):
    src = tmp_path / "broken.tif"
    src.write_bytes(b"")

    def fail(path):
        raise OSError("not a bioimage")

    monkeypatch.setattr(bioio_meta, "open_bioimage", fail)
    result = CliRunner().invoke(cli, ["describe", str(src)])
    assert result.exit_code == 1
