"""Engine configuration loaded from environment variables.

All values have defaults matching the field app's behaviour. ``from_env()``
raises ``ConfigValidationError`` if any value is out of its valid range,
so a bad deployment setting fails at startup instead of mid-drawing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from fieldops_geo.core.exceptions import GeoEngineError


class ConfigValidationError(GeoEngineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable engine configuration.

    Attributes:
        vertex_highlight_s: How long the most recent polygon vertex stays
            highlighted in the drawing preview, in seconds.
        default_circle_radius_m: Radius given to a circle when only its
            centre has been tapped, in metres.
        feedback_display_s: How long an operator feedback message stays
            current before the session reports no message, in seconds.
        default_geofence_name: Name pre-filled for a new geofence.
        focus_min_delta_deg: Smallest latitude/longitude span of a map
            region framing a feature, in degrees.
    """

    vertex_highlight_s: float = 2.0
    default_circle_radius_m: float = 100.0
    feedback_display_s: float = 3.0
    default_geofence_name: str = "New Geofence"
    focus_min_delta_deg: float = 0.01

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
            ValueError: If a numeric environment variable cannot be parsed.
        """
        config = cls(
            vertex_highlight_s=float(os.getenv("GEO_VERTEX_HIGHLIGHT_S", "2.0")),
            default_circle_radius_m=float(os.getenv("GEO_DEFAULT_CIRCLE_RADIUS_M", "100")),
            feedback_display_s=float(os.getenv("GEO_FEEDBACK_DISPLAY_S", "3.0")),
            default_geofence_name=os.getenv("GEO_DEFAULT_GEOFENCE_NAME", "New Geofence"),
            focus_min_delta_deg=float(os.getenv("GEO_FOCUS_MIN_DELTA_DEG", "0.01")),
        )
        _validate(config)
        return config


def _validate(config: EngineConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.vertex_highlight_s < 0:
        raise ConfigValidationError(
            "GEO_VERTEX_HIGHLIGHT_S",
            config.vertex_highlight_s,
            "must be >= 0 (seconds)",
        )

    if config.default_circle_radius_m <= 0:
        raise ConfigValidationError(
            "GEO_DEFAULT_CIRCLE_RADIUS_M",
            config.default_circle_radius_m,
            "must be > 0 (metres)",
        )

    if config.feedback_display_s < 0:
        raise ConfigValidationError(
            "GEO_FEEDBACK_DISPLAY_S",
            config.feedback_display_s,
            "must be >= 0 (seconds)",
        )

    if not config.default_geofence_name.strip():
        raise ConfigValidationError(
            "GEO_DEFAULT_GEOFENCE_NAME",
            config.default_geofence_name,
            "must not be empty",
        )

    if config.focus_min_delta_deg <= 0:
        raise ConfigValidationError(
            "GEO_FOCUS_MIN_DELTA_DEG",
            config.focus_min_delta_deg,
            "must be > 0 (degrees)",
        )
