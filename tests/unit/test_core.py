"""Tests for core infrastructure modules."""

import pytest
from pathlib import Path


class TestConfig:
    """Test configuration classes."""

    def test_default_config(self):
        from bodymap_pipeline.core.config import Config
        config = Config()
        assert config.classifier is not None
        assert config.aggregation is not None
        assert config.output_dir is None

    def test_default_thresholds(self):
        from bodymap_pipeline.core.config import ClassifierConfig
        config = ClassifierConfig()
        assert config.expressed_threshold == 1.0
        assert config.stable_threshold == 5.0
        assert config.specificity_threshold == 0.85

    def test_invalid_thresholds(self):
        from bodymap_pipeline.core.config import ClassifierConfig

        with pytest.raises(ValueError):
            ClassifierConfig(specificity_threshold=1.5)
        with pytest.raises(ValueError):
            ClassifierConfig(expressed_threshold=10.0, stable_threshold=5.0)
        with pytest.raises(ValueError):
            ClassifierConfig(pseudocount=0.0)
        with pytest.raises(ValueError, match="pseudocount"):
            ClassifierConfig(pseudocount=0.5)

    def test_invalid_aggregation(self):
        from bodymap_pipeline.core.config import AggregationConfig

        with pytest.raises(ValueError):
            AggregationConfig(method="sum")
        with pytest.raises(ValueError):
            AggregationConfig(min_samples=0)

    def test_path_conversion(self):
        from bodymap_pipeline.core.config import Config
        config = Config(output_dir="results")
        assert config.output_dir == Path("results")

    def test_json_roundtrip(self, temp_dir):
        from bodymap_pipeline.core.config import Config, ClassifierConfig

        config = Config(
            classifier=ClassifierConfig(specificity_threshold=0.9),
            output_dir=temp_dir,
        )
        path = temp_dir / "config.json"
        config.to_json(path)

        loaded = Config.from_json(path)
        assert loaded.classifier.specificity_threshold == 0.9
        assert loaded.output_dir == temp_dir

    def test_from_yaml(self, temp_dir):
        from bodymap_pipeline.core.config import Config

        path = temp_dir / "pipeline.yaml"
        path.write_text(
            "config:\n"
            "  classifier:\n"
            "    stable_threshold: 10\n"
            "  aggregation:\n"
            "    min_mapping_rate: 40\n"
        )

        config = Config.from_yaml(path)
        assert config.classifier.stable_threshold == 10
        assert config.aggregation.min_mapping_rate == 40

    def test_from_env(self, monkeypatch):
        from bodymap_pipeline.core.config import Config

        monkeypatch.setenv("BODYMAP_SPECIFICITY_THRESHOLD", "0.8")
        monkeypatch.setenv("BODYMAP_MIN_SAMPLES", "2")
        monkeypatch.setenv("BODYMAP_VERBOSE", "true")
        monkeypatch.setenv("BODYMAP_PSEUDOCOUNT", "2")
        monkeypatch.setenv("BODYMAP_LOG_BASE", "10")

        config = Config.from_env()
        assert config.classifier.specificity_threshold == 0.8
        assert config.aggregation.min_samples == 2
        assert config.verbose is True
        assert config.classifier.pseudocount == 2.0
        assert config.classifier.log_base == 10.0

    def test_from_env_defaults(self, monkeypatch):
        from bodymap_pipeline.core.config import Config

        monkeypatch.delenv("BODYMAP_PSEUDOCOUNT", raising=False)
        monkeypatch.delenv("BODYMAP_LOG_BASE", raising=False)

        config = Config.from_env()
        assert config.classifier.pseudocount == 1.0
        assert config.classifier.log_base == 2.0
