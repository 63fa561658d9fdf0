"""Configuration for the dispute arbiter."""

from arbiter.config.settings import (
    AppConfig,
    GenerationConfig,
    NarrationConfig,
    ResearchConfig,
    StorageConfig,
    TranscriptionConfig,
    load_environment,
)

__all__: list[str] = [
    "AppConfig",
    "GenerationConfig",
    "NarrationConfig",
    "ResearchConfig",
    "StorageConfig",
    "TranscriptionConfig",
    "load_environment",
]
