from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import yaml

from .config.settings import DEFAULTS_PATH, SimulationSettings

# =============================================================================
# Constants
# =============================================================================

REQUIRED_CONFIG_SECTIONS = ["simulation"]
REQUIRED_SIMULATION_KEYS = ["case_counts", "period_count", "cfr"]


# =============================================================================
# Config Tracker Classes
# =============================================================================


class ConfigTracker(dict):
    """
    Run-file mapping that records which keys were read.
    Nested sections are wrapped on first access; other values are returned as is.
    """

    def __init__(self, data: dict[str, Any], path: str = ""):
        super().__init__(data)
        self._path = path
        self._read: set[str] = set()
        self._sections: dict[str, ConfigTracker] = {}

    def __getitem__(self, key: str) -> Any:
        self._read.add(key)
        value = super().__getitem__(key)
        if not isinstance(value, dict):
            return value
        if key not in self._sections:
            self._sections[key] = ConfigTracker(value, self._key_path(key))
        return self._sections[key]

    def get(self, key: str, default: Any = None) -> Any:
        self._read.add(key)
        return self[key] if key in self else default

    def unused(self) -> list[str]:
        """Dotted paths of keys nobody read, sections included."""
        paths = []
        for key in self:
            if key not in self._read:
                paths.append(self._key_path(key))
            elif key in self._sections:
                paths.extend(self._sections[key].unused())
        return sorted(paths)

    def report_unused(self, out_stream=None) -> list[str]:
        """Print unused parameters to the output stream and return their paths."""
        if out_stream is None:
            out_stream = sys.stdout
        paths = self.unused()
        if paths:
            rule = "=" * 60
            out_stream.write(f"\n{rule}\nWARNING: unused configuration parameters:\n{rule}\n")
            for path in paths:
                out_stream.write(f"  - {path}\n")
            out_stream.write(f"{rule}\n")
        return paths

    def _key_path(self, key: str) -> str:
        return f"{self._path}.{key}" if self._path else str(key)


# =============================================================================
# Loading
# =============================================================================


def load_config_from_file(path: Path | str | None = None) -> ConfigTracker:
    """Load a run file from YAML and wrap it with a tracker.

    The packaged defaults are used when path is None.
    """
    path = Path(path) if path is not None else DEFAULTS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        raise ValueError(f"Config file is empty: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a mapping at top level: {path}")

    config = ConfigTracker(data)
    validate_config(config)
    return config


def validate_config(config: ConfigTracker | dict[str, Any]) -> None:
    """
    Validate that all required keys are present in the run file.

    Raises:
        KeyError: If a required section or key is missing
    """
    for section in REQUIRED_CONFIG_SECTIONS:
        if section not in config:
            raise KeyError(f"Missing required section in config: '{section}'")

    simulation = config["simulation"]
    if not isinstance(simulation, dict):
        raise ValueError("config section 'simulation' must be a mapping")
    for key in REQUIRED_SIMULATION_KEYS:
        if key not in simulation:
            raise KeyError(f"Missing required key in config simulation: '{key}'")


def settings_from_config(
    config: ConfigTracker | dict[str, Any],
    overrides: dict[str, Any] | None = None,
) -> SimulationSettings:
    """
    Build SimulationSettings from a loaded run file.

    Non-None entries of overrides (keys: case_counts, period_count, cfr, seed,
    max_workers, output_dir) replace the file values.
    """
    simulation = config["simulation"]
    execution = config.get("execution", {}) or {}
    output = config.get("output", {}) or {}

    values: dict[str, Any] = {
        # Raw values; SimulationSettings rejects wrong shapes and lengths
        "case_counts": simulation["case_counts"],
        "period_count": simulation["period_count"],
        "cfr": simulation["cfr"],
        "seed": simulation.get("seed"),
        "max_workers": execution.get("max_workers", 1),
        "output_dir": output.get("dir"),
    }
    for key, value in (overrides or {}).items():
        if key not in values:
            raise KeyError(f"Unknown settings override: '{key}'")
        if value is not None:
            values[key] = value

    return SimulationSettings(**values)
