"""Parameter configuration for polyhedron volume computation."""

from dataclasses import dataclass, asdict, fields
from typing import Optional, Dict, Any, List
import json
import math
from pathlib import Path

from polyvolume.errors import ConfigurationError, InvalidParameterError


# Absolute tolerance used when comparing a computed volume with an expected one
DEFAULT_TOLERANCE = 1e-4

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class VolumeConfig:
    """Volume computation and verification configuration."""
    tolerance: float = DEFAULT_TOLERANCE
    one_sided_tolerance: bool = False
    check_bounds: bool = True
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    def validate(self) -> List[str]:
        """Validate configuration parameters."""
        errors = []

        if not isinstance(self.tolerance, (int, float)) or isinstance(self.tolerance, bool):
            errors.append(f"tolerance must be a number, got {self.tolerance!r}")
        elif not math.isfinite(self.tolerance) or self.tolerance <= 0:
            errors.append(f"tolerance must be positive and finite, got {self.tolerance}")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'VolumeConfig':
        """Create configuration from dictionary."""
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                "Configuration must be a JSON object",
                details={"got": type(config_dict).__name__}
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise InvalidParameterError(
                "Unknown configuration keys",
                details={"keys": unknown}
            )
        return cls(**config_dict)

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'VolumeConfig':
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(path, 'r') as f:
            config_dict = json.load(f)

        config = cls.from_dict(config_dict)

        errors = config.validate()
        if errors:
            raise ConfigurationError(
                f"Invalid configuration loaded from {filepath}:\n" +
                "\n".join(errors),
                details={"num_errors": len(errors)}
            )

        return config


def create_default_config() -> VolumeConfig:
    """Create default configuration with an absolute-difference tolerance check."""
    return VolumeConfig()


def create_legacy_config() -> VolumeConfig:
    """
    Create a configuration using the legacy one-sided tolerance check.

    The legacy check is only ``volume - expected < tolerance``, which accepts
    any volume below the expected one.
    """
    return VolumeConfig(one_sided_tolerance=True)
