"""Runtime configuration for Tessera.

Values come from keyword overrides first, then TESSERA_* environment
variables (the CLI loads a .env file into the environment), then defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .generation.wfc import ContradictionPolicy


ENV_PREFIX = "TESSERA_"


class TesseraConfig(BaseModel):
    """Settings for a solver session and its viewer."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=32, gt=0)
    height: int = Field(default=32, gt=0)
    tile_size: int = Field(default=20, gt=0)  # Renderer only
    seed: int | None = None
    policy: ContradictionPolicy = ContradictionPolicy.TOLERANT_RESET
    tick_interval: float = Field(default=0.02, gt=0)  # Seconds between TUI ticks
    steps_per_tick: int = Field(default=1, ge=1)
    data_dir: Path = Path("data")

    @property
    def total_cells(self) -> int:
        return self.width * self.height


def _from_environment() -> dict[str, Any]:
    """Collect TESSERA_* variables for every config field."""
    values: dict[str, Any] = {}
    for name in TesseraConfig.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw != "":
            values[name] = raw
    return values


def load_config(**overrides: Any) -> TesseraConfig:
    """Build a config from the environment plus explicit overrides.

    Overrides set to None are ignored so argparse defaults can be passed
    straight through.

    Raises:
        pydantic.ValidationError: If any value is invalid
    """
    values = _from_environment()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return TesseraConfig.model_validate(values)
