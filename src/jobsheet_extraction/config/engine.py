"""Engine configuration: scoring thresholds, batch sizing and LLM settings.

Defaults reproduce the audit rules used by the job sheet review team. A YAML
file can override any value; point ``JOBSHEET_ENGINE_CONFIG`` at it or pass
an explicit path to ``load_engine_config``.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "JOBSHEET_ENGINE_CONFIG"


@dataclass
class LLMStrategyConfig:
    """Configuration for the LLM fallback strategy."""

    prompt_name: str = "field_extraction"  # Prompt file name (without .md)
    model: Optional[str] = None  # None = deployment or OPENAI_MODEL from the environment
    temperature: float = 0.0
    max_tokens: int = 256
    timeout_seconds: float = 30.0
    # Only the head of the document is sent to the model
    max_chars: int = 4000
    # Answers at or below this confidence are discarded
    min_confidence: float = 50.0

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "LLMStrategyConfig":
        """Create config from dictionary."""
        return cls(
            prompt_name=config.get("prompt_name", "field_extraction"),
            model=config.get("model"),
            temperature=config.get("temperature", 0.0),
            max_tokens=config.get("max_tokens", 256),
            timeout_seconds=config.get("timeout_seconds", 30.0),
            max_chars=config.get("max_chars", 4000),
            min_confidence=config.get("min_confidence", 50.0),
        )


@dataclass
class EngineConfig:
    """Thresholds used by the document processor and batch runner."""

    # Fields with confidence in (0, threshold) send a document to review
    low_confidence_threshold: float = 70.0
    pass_threshold: float = 90.0
    required_weight: float = 0.7
    optional_weight: float = 0.3
    # LLM runs when the best deterministic confidence is below this
    llm_trigger_confidence: float = 70.0
    batch_max_workers: int = 4
    default_spec: str = "job_sheet"
    llm: LLMStrategyConfig = field(default_factory=LLMStrategyConfig)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "EngineConfig":
        """Create config from dictionary."""
        instance = cls(
            low_confidence_threshold=config.get("low_confidence_threshold", 70.0),
            pass_threshold=config.get("pass_threshold", 90.0),
            required_weight=config.get("required_weight", 0.7),
            optional_weight=config.get("optional_weight", 0.3),
            llm_trigger_confidence=config.get("llm_trigger_confidence", 70.0),
            batch_max_workers=config.get("batch_max_workers", 4),
            default_spec=config.get("default_spec", "job_sheet"),
            llm=LLMStrategyConfig.from_dict(config.get("llm") or {}),
        )
        instance.validate()
        return instance

    def validate(self) -> None:
        """Reject values that would make scoring meaningless."""
        if abs(self.required_weight + self.optional_weight - 1.0) > 1e-9:
            raise ValueError(
                f"required_weight + optional_weight must equal 1.0, got "
                f"{self.required_weight} + {self.optional_weight}"
            )
        if self.batch_max_workers < 1:
            raise ValueError(f"batch_max_workers must be >= 1, got {self.batch_max_workers}")
        for name in ("low_confidence_threshold", "pass_threshold", "llm_trigger_confidence"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within 0-100, got {value}")


def load_engine_config(config_path: Path) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid YAML or holds invalid values.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Engine config not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in engine config {config_path}: {e}")

    if data is None:
        logger.warning(f"Empty engine config at {config_path}, using defaults")
        return EngineConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Engine config {config_path} must be a mapping")

    config = EngineConfig.from_dict(data)
    logger.debug(f"Loaded engine config from {config_path}")
    return config


# Cached engine config (loaded once per session)
_cached_config: Optional[EngineConfig] = None


def get_engine_config(force_reload: bool = False) -> EngineConfig:
    """Get the current engine configuration (cached).

    Reads the file named by ``JOBSHEET_ENGINE_CONFIG`` when set, otherwise
    returns defaults.
    """
    global _cached_config

    if force_reload or _cached_config is None:
        config_path = os.getenv(CONFIG_ENV_VAR)
        if config_path:
            _cached_config = load_engine_config(Path(config_path))
        else:
            _cached_config = EngineConfig()

    return _cached_config
