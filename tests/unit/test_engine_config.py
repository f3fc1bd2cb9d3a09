"""Unit tests for engine configuration."""

import pytest

from jobsheet_extraction.config.engine import (
    CONFIG_ENV_VAR,
    EngineConfig,
    LLMStrategyConfig,
    get_engine_config,
    load_engine_config,
)


class TestEngineConfigDefaults:

    def test_scoring_defaults(self):
        config = EngineConfig()
        assert config.low_confidence_threshold == 70.0
        assert config.pass_threshold == 90.0
        assert config.required_weight == 0.7
        assert config.optional_weight == 0.3
        assert config.llm_trigger_confidence == 70.0
        assert config.batch_max_workers == 4
        assert config.default_spec == "job_sheet"

    def test_llm_defaults(self):
        llm = LLMStrategyConfig()
        assert llm.prompt_name == "field_extraction"
        assert llm.model is None
        assert llm.max_chars == 4000
        assert llm.min_confidence == 50.0
        assert llm.timeout_seconds == 30.0


class TestFromDict:

    def test_partial_override(self):
        config = EngineConfig.from_dict({"pass_threshold": 85, "llm": {"model": "gpt-4o"}})
        assert config.pass_threshold == 85
        assert config.low_confidence_threshold == 70.0
        assert config.llm.model == "gpt-4o"
        assert config.llm.max_chars == 4000

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="must equal 1.0"):
            EngineConfig.from_dict({"required_weight": 0.8})

    def test_workers_must_be_positive(self):
        with pytest.raises(ValueError, match="batch_max_workers"):
            EngineConfig.from_dict({"batch_max_workers": 0})

    def test_threshold_range(self):
        with pytest.raises(ValueError, match="pass_threshold"):
            EngineConfig.from_dict({"pass_threshold": 120})


class TestLoadEngineConfig:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("pass_threshold: 95\nbatch_max_workers: 2\nllm:\n  timeout_seconds: 10\n")
        config = load_engine_config(path)
        assert config.pass_threshold == 95
        assert config.batch_max_workers == 2
        assert config.llm.timeout_seconds == 10

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_engine_config(tmp_path / "missing.yaml")

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("")
        assert load_engine_config(path) == EngineConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("pass_threshold: [90\n")
        with pytest.raises(ValueError):
            load_engine_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_engine_config(path)


class TestGetEngineConfig:

    def test_defaults_without_env(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert get_engine_config(force_reload=True) == EngineConfig()

    def test_env_file(self, tmp_path, monkeypatch):
        path = tmp_path / "engine.yaml"
        path.write_text("pass_threshold: 80\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        try:
            assert get_engine_config(force_reload=True).pass_threshold == 80
            # Cached until reloaded
            assert get_engine_config() is get_engine_config()
        finally:
            monkeypatch.delenv(CONFIG_ENV_VAR)
            get_engine_config(force_reload=True)
