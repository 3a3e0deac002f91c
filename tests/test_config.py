from __future__ import annotations

from planeio import config
from planeio.config import load_settings
from planeio.errors import RegionTooLargeError
from planeio.planes import PlaneDescriptor, Region
from planeio.region import region_byte_count
from planeio.tiling import optimal_tile

import pytest


def test_defaults(monkeypatch):
    for name in ("PLANEIO_MAX_REGION_BYTES", "PLANEIO_TILE_SOFT_CAP_BYTES", "PLANEIO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.max_region_bytes == 2**31 - 1
    assert settings.tile_soft_cap_bytes == 1024 * 1024
    assert settings.max_cell_bytes == 2 * 1024 * 1024
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PLANEIO_MAX_REGION_BYTES", "4096")
    monkeypatch.setenv("PLANEIO_TILE_SOFT_CAP_BYTES", "512")
    monkeypatch.setenv("PLANEIO_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.max_region_bytes == 4096
    assert settings.max_cell_bytes == 1024
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["lots", "-5", "0"])
def test_invalid_values_fall_back(monkeypatch, value):
    monkeypatch.setenv("PLANEIO_MAX_REGION_BYTES", value)
    assert load_settings().max_region_bytes == 2**31 - 1


def test_settings_drive_limits(monkeypatch):
    monkeypatch.setenv("PLANEIO_MAX_REGION_BYTES", "100")
    monkeypatch.setenv("PLANEIO_TILE_SOFT_CAP_BYTES", "500")
    monkeypatch.setattr(config, "settings", load_settings())
    desc = PlaneDescriptor(20, 20, 1)
    with pytest.raises(RegionTooLargeError):
        region_byte_count(desc, Region.full(desc))
    cell = optimal_tile(100, 100, 1, 10, 10)
    assert (cell.width, cell.height) == (100, 10)
