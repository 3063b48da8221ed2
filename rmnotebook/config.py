"""
Conversion settings.

Reads the [convert] table from a TOML file, e.g.:

    [convert]
    format = "pdf"
    workers = 4
    processes = 2
    scale = 0.3172
    output_dir = "output"
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import tomli

from .constants import DEFAULT_PDF_SCALE

OUTPUT_FORMATS = ("pdf", "svg")


@dataclass(frozen=True)
class ConvertConfig:
    """Settings for converting notebooks."""
    format: str = "pdf"
    workers: int = 1
    processes: int = 1
    scale: float = DEFAULT_PDF_SCALE
    output_dir: Path = field(default_factory=lambda: Path("output"))

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.format!r}")
        for name in ("workers", "processes"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if (not isinstance(self.scale, (int, float)) or isinstance(self.scale, bool)
                or self.scale <= 0):
            raise ValueError(f"scale must be a positive number, got {self.scale!r}")

    def override(self, **changes) -> ConvertConfig:
        """Return a copy with every non-None value in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_config(config_path: Path) -> dict:
    """Parse the [convert] table of a TOML file."""
    with open(config_path, "rb") as f:
        data = tomli.load(f)
    return data.get("convert", {})


def load_config(config_path: Optional[Path] = None) -> ConvertConfig:
    """
    Load settings, falling back to defaults.

    A missing file (or no path at all) yields the default config.
    Invalid values raise ValueError.
    """
    if config_path is None or not Path(config_path).exists():
        return ConvertConfig()

    table = parse_config(Path(config_path))
    known = {"format", "workers", "processes", "scale", "output_dir"}
    unknown = set(table) - known
    if unknown:
        raise ValueError(f"Unknown [convert] keys: {', '.join(sorted(unknown))}")

    if "output_dir" in table:
        if not isinstance(table["output_dir"], str):
            raise ValueError(f"output_dir must be a string, got {table['output_dir']!r}")
        table["output_dir"] = Path(table["output_dir"])
    return ConvertConfig(**table)
