"""Engine configuration management."""

from jobsheet_extraction.config.engine import (
    EngineConfig,
    LLMStrategyConfig,
    get_engine_config,
    load_engine_config,
)

__all__ = [
    "EngineConfig",
    "LLMStrategyConfig",
    "get_engine_config",
    "load_engine_config",
]
