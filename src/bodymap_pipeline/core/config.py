"""
Pipeline configuration management.

Provides dataclass-based configuration with validation and serialization.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Literal, Any
import json
import os

# Classification policy constants
EXPRESSED_THRESHOLD = 1.0
STABLE_THRESHOLD = 5.0
SPECIFICITY_THRESHOLD = 0.85


@dataclass
class ClassifierConfig:
    """Expression classification thresholds."""

    expressed_threshold: float = EXPRESSED_THRESHOLD
    """A body part counts as expressed when its value is above this."""

    stable_threshold: float = STABLE_THRESHOLD
    """A body part counts as stably expressed when its value is above this."""

    specificity_threshold: float = SPECIFICITY_THRESHOLD
    """Minimum tau for a gene to be called Specific."""

    pseudocount: float = 1.0
    """Pseudocount added before the log transform (at least 1)."""

    log_base: float = 2.0
    """Base of the log transform applied before scoring."""

    def __post_init__(self):
        if self.expressed_threshold < 0:
            raise ValueError(
                f"expressed_threshold must be >= 0, got {self.expressed_threshold}"
            )
        if self.stable_threshold < self.expressed_threshold:
            raise ValueError(
                "stable_threshold must be >= expressed_threshold "
                f"({self.stable_threshold} < {self.expressed_threshold})"
            )
        if not 0 < self.specificity_threshold <= 1:
            raise ValueError(
                f"specificity_threshold must be in (0, 1], got {self.specificity_threshold}"
            )
        # Keeps log values of non-negative input at or above zero
        if self.pseudocount < 1:
            raise ValueError(f"pseudocount must be >= 1, got {self.pseudocount}")
        if self.log_base <= 1:
            raise ValueError(f"log_base must be > 1, got {self.log_base}")


@dataclass
class AggregationConfig:
    """Sample-to-body-part aggregation configuration."""

    body_part_col: str = "body_part"
    """Metadata column holding the body part of each sample."""

    sample_col: Optional[str] = None
    """Metadata column with sample ids (None: use the metadata index)."""

    mapping_rate_col: str = "mapping_rate"
    """Metadata column with the quantifier mapping rate (percent)."""

    min_mapping_rate: float = 0.0
    """Samples mapping below this rate are dropped (0 disables the filter)."""

    min_samples: int = 1
    """Minimum retained samples for a body part to be kept."""

    method: Literal["median", "mean"] = "median"
    """Summary statistic across replicate samples."""

    def __post_init__(self):
        if self.method not in ("median", "mean"):
            raise ValueError(f"Unknown aggregation method: {self.method}")
        if self.min_samples < 1:
            raise ValueError(f"min_samples must be >= 1, got {self.min_samples}")


@dataclass
class Config:
    """
    Main pipeline configuration.

    Example:
        >>> config = Config(
        ...     classifier=ClassifierConfig(specificity_threshold=0.9),
        ...     output_dir="results/",
        ... )
        >>> pipeline = Pipeline(config)
    """

    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)

    # Output settings
    output_dir: Optional[Path] = None
    """Base output directory."""

    float_format: str = "%.6g"
    """Float format for tabular output."""

    # Logging
    verbose: bool = False
    """Enable verbose logging."""

    log_file: Optional[Path] = None
    """Log file path."""

    def __post_init__(self):
        """Convert paths."""
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        d = asdict(self)
        # Convert Path objects to strings
        for key, value in d.items():
            if isinstance(value, Path):
                d[key] = str(value)
        return d

    def to_json(self, path: Path | str) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create from dictionary."""
        d = dict(d)
        # Handle nested configs
        if "classifier" in d and isinstance(d["classifier"], dict):
            d["classifier"] = ClassifierConfig(**d["classifier"])
        if "aggregation" in d and isinstance(d["aggregation"], dict):
            d["aggregation"] = AggregationConfig(**d["aggregation"])
        return cls(**d)

    @classmethod
    def from_json(cls, path: Path | str) -> "Config":
        """Load configuration from JSON file."""
        path = Path(path)
        with open(path) as f:
            d = json.load(f)
        return cls.from_dict(d)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file (top-level or under ``config:``)."""
        import yaml

        path = Path(path)
        with open(path) as f:
            d = yaml.safe_load(f) or {}
        return cls.from_dict(d.get("config", d))

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        classifier = ClassifierConfig(
            expressed_threshold=float(
                os.getenv("BODYMAP_EXPRESSED_THRESHOLD", str(EXPRESSED_THRESHOLD))
            ),
            stable_threshold=float(
                os.getenv("BODYMAP_STABLE_THRESHOLD", str(STABLE_THRESHOLD))
            ),
            specificity_threshold=float(
                os.getenv("BODYMAP_SPECIFICITY_THRESHOLD", str(SPECIFICITY_THRESHOLD))
            ),
            pseudocount=float(os.getenv("BODYMAP_PSEUDOCOUNT", "1.0")),
            log_base=float(os.getenv("BODYMAP_LOG_BASE", "2.0")),
        )
        aggregation = AggregationConfig(
            min_mapping_rate=float(os.getenv("BODYMAP_MIN_MAPPING_RATE", "0")),
            min_samples=int(os.getenv("BODYMAP_MIN_SAMPLES", "1")),
        )
        return cls(
            classifier=classifier,
            aggregation=aggregation,
            output_dir=os.getenv("BODYMAP_OUTPUT_DIR") or None,
            verbose=os.getenv("BODYMAP_VERBOSE", "").lower() in ("1", "true", "yes"),
        )
