"""Configuration management for infiller.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- InfillParameters: Immutable per-generation fill parameters
- ZigzagConfig: Zigzag sub-options
- ProcessingConfig: Layer processing settings
- LoggingConfig: Logging settings
- InfillerSettings: Main application settings
"""

from infiller.config.settings import (
    CONNECTABLE_PATTERNS,
    STITCHED_PATTERNS,
    FillPattern,
    InfillerSettings,
    InfillParameters,
    LoggingConfig,
    ProcessingConfig,
    ZigzagConfig,
    ZigzagEndPieces,
    get_default_settings,
)

__all__ = [
    "CONNECTABLE_PATTERNS",
    "STITCHED_PATTERNS",
    "FillPattern",
    "InfillParameters",
    "InfillerSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "ZigzagConfig",
    "ZigzagEndPieces",
    "get_default_settings",
]
