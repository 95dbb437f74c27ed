"""
Configuration management for Transform Flow.

Settings live in dataclasses that can be loaded from and saved to JSON,
and overridden from TFLOW_* environment variables.
"""

import json
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any


@dataclass
class ScanSettings:
    """Scan-line feature detection settings."""
    spacing: int | None = None       # None = height // spacing_divisor
    spacing_divisor: int = 40
    bin_count: int | None = None     # None = use the scan spacing
    tilt: float = 0.0                # radians (the --tilt flag takes degrees)
    window_size: int = 5
    contrast_threshold: float = 600.0
    clip_scale: float = 0.98


@dataclass
class TableSettings:
    """Chain matching tolerances, in aligned-space units."""
    max_displacement_x: float = 4.0
    max_displacement_y: float = 25.0

    @property
    def max_displacement(self) -> tuple[float, float]:
        return (self.max_displacement_x, self.max_displacement_y)


@dataclass
class AlignSettings:
    """Table-to-table alignment settings."""
    max_shift: int = 2
    sigma: float = 1.0


@dataclass
class Config:
    """
    Main configuration container.

    Example:
        config = Config.load("tflow.json")
        scanner = FeatureScanner(config.scan, config.table)
    """
    scan: ScanSettings = field(default_factory=ScanSettings)
    table: TableSettings = field(default_factory=TableSettings)
    align: AlignSettings = field(default_factory=AlignSettings)

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        return load_config(path)

    def save(self, path: str | Path) -> None:
        save_config(self, path)

    def to_dict(self) -> dict:
        return {
            "scan": asdict(self.scan),
            "table": asdict(self.table),
            "align": asdict(self.align),
        }

    def apply_env(self, prefix: str = "TFLOW_") -> "Config":
        """
        Override settings from environment variables.

        Variables are named <prefix><SECTION>_<FIELD>, e.g.
        TFLOW_SCAN_SPACING=12 or TFLOW_TABLE_MAX_DISPLACEMENT_Y=30.
        Values use the units of the settings fields, so TFLOW_SCAN_TILT
        is in radians.
        """
        env = get_env_config(prefix)
        for section_name in ("scan", "table", "align"):
            section = getattr(self, section_name)
            for f in fields(section):
                key = f"{section_name}_{f.name}"
                if key in env:
                    setattr(section, f.name, _coerce(env[key], getattr(section, f.name)))
        return self


def _coerce(value: str, current: Any) -> Any:
    """Convert an environment string to the type of the current value."""
    if value.lower() in ("", "none"):
        return None
    if isinstance(current, bool):
        return value.lower() in ("1", "true", "yes", "on")
    if isinstance(current, float):
        return float(value)
    if isinstance(current, int) or current is None:
        try:
            return int(value)
        except ValueError:
            return float(value)
    return value


def _section(cls, data: dict):
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: str | Path) -> Config:
    """
    Load configuration from a JSON file.

    Unknown keys are ignored and missing keys keep their defaults.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        json.JSONDecodeError: If the JSON is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    return Config(
        scan=_section(ScanSettings, data.get("scan", {})),
        table=_section(TableSettings, data.get("table", {})),
        align=_section(AlignSettings, data.get("align", {})),
    )


def save_config(config: Config, path: str | Path) -> None:
    """Save configuration to a JSON file."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_env_config(prefix: str = "TFLOW_") -> dict[str, Any]:
    """
    Get configuration from environment variables.

    All environment variables starting with the prefix will be included.
    Variable names are converted to lowercase with the prefix removed.

    Example:
        TFLOW_SCAN_SPACING=12 -> {"scan_spacing": "12"}
    """
    config = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            config_key = key[len(prefix):].lower()
            config[config_key] = value
    return config
