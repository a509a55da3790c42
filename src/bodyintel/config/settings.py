"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".bodyintel"


def _default_config_path() -> Path:
    """Return the default configuration file path."""
    return _default_config_dir() / "config.yaml"


@dataclass
class AnalysisConfig:
    """Body intelligence analysis configuration."""

    period_days: int = 30
    rolling_window_days: int = 7


@dataclass
class CalibrationConfig:
    """TDEE calibration configuration."""

    tef_multiplier: float = 1.10
    period_days: int = 14


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table" or "json"
    weight_unit: str = "kg"  # "kg" or "lbs"


@dataclass
class Settings:
    """Main application settings."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.bodyintel/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse analysis config
        if "analysis" in data:
            analysis_data = data["analysis"] or {}
            if "period_days" in analysis_data:
                settings.analysis.period_days = int(analysis_data["period_days"])
            if "rolling_window_days" in analysis_data:
                settings.analysis.rolling_window_days = int(
                    analysis_data["rolling_window_days"]
                )

        # Parse calibration config
        if "calibration" in data:
            cal_data = data["calibration"] or {}
            if "tef_multiplier" in cal_data:
                settings.calibration.tef_multiplier = float(cal_data["tef_multiplier"])
            if "period_days" in cal_data:
                settings.calibration.period_days = int(cal_data["period_days"])

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                fmt = def_data["output_format"]
                if fmt not in ("table", "json"):
                    raise ValueError(f"output_format must be 'table' or 'json', got '{fmt}'")
                settings.defaults.output_format = fmt
            if "weight_unit" in def_data:
                unit = def_data["weight_unit"]
                if unit not in ("kg", "lbs"):
                    raise ValueError(f"weight_unit must be 'kg' or 'lbs', got '{unit}'")
                settings.defaults.weight_unit = unit

        return settings

    def save(self, config_path: Optional[Path] = None) -> Path:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.bodyintel/config.yaml

        Returns:
            Path the settings were written to
        """
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        return config_path

    def to_dict(self) -> dict:
        """Settings as plain nested dicts (YAML/JSON friendly)."""
        return {
            "analysis": {
                "period_days": self.analysis.period_days,
                "rolling_window_days": self.analysis.rolling_window_days,
            },
            "calibration": {
                "tef_multiplier": self.calibration.tef_multiplier,
                "period_days": self.calibration.period_days,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "weight_unit": self.defaults.weight_unit,
            },
        }


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
