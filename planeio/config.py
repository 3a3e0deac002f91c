"""Runtime settings read from the environment.

Recognised variables:

- ``PLANEIO_MAX_REGION_BYTES``: largest region a single read may return
  (default 2**31 - 1, the 2 GiB limit of one byte array)
- ``PLANEIO_TILE_SOFT_CAP_BYTES``: soft byte cap used for default tile heights;
  the per-cell ceiling is twice this value (default 1 MiB)
- ``PLANEIO_LOG_LEVEL``: level of the stderr sink installed by the CLI
"""

import os
from dataclasses import dataclass
from loguru import logger

DEFAULT_MAX_REGION_BYTES = 2**31 - 1
DEFAULT_TILE_SOFT_CAP_BYTES = 1024 * 1024
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Resolved planeio settings.

    :ivar max_region_bytes: Upper bound for a single region buffer
    :ivar tile_soft_cap_bytes: Soft byte cap for tile rows
    :ivar log_level: Log level name for the CLI sink
    """

    max_region_bytes: int = DEFAULT_MAX_REGION_BYTES
    tile_soft_cap_bytes: int = DEFAULT_TILE_SOFT_CAP_BYTES
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def max_cell_bytes(self):
        # type: () -> int
        """Total byte ceiling for one cache cell."""
        return 2 * self.tile_soft_cap_bytes


def _positive_int_env(name, default):
    # type: (str, int) -> int
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}: {raw!r}. Using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, got {value}. Using default {default}")
        return default
    return value


def load_settings():
    # type: () -> Settings
    """Build settings from the current environment."""
    return Settings(
        max_region_bytes=_positive_int_env(
            "PLANEIO_MAX_REGION_BYTES", DEFAULT_MAX_REGION_BYTES
        ),
        tile_soft_cap_bytes=_positive_int_env(
            "PLANEIO_TILE_SOFT_CAP_BYTES", DEFAULT_TILE_SOFT_CAP_BYTES
        ),
        log_level=os.environ.get("PLANEIO_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


settings = load_settings()
