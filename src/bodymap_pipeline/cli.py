"""
Command-line interface for bodymap-pipeline.

Usage:
    bodymap-pipeline run --config pipeline.yaml
    bodymap-pipeline aggregate --expression tpm.csv --metadata samples.csv
    bodymap-pipeline classify --input bodypart_expression.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger("bodymap_pipeline")


def _setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging for CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _missing(*paths: Optional[str]) -> Optional[str]:
    """First path that does not exist, if any."""
    for path in paths:
        if path and not Path(path).exists():
            return path
    return None


def cmd_run(args: argparse.Namespace) -> int:
    """Run aggregation and classification from a YAML config file."""
    import yaml
    import pandas as pd
    from bodymap_pipeline.core.config import Config
    from bodymap_pipeline.pipeline import Pipeline

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        return 1

    with open(config_path) as f:
        pipeline_def = yaml.safe_load(f) or {}

    try:
        config = Config.from_dict(pipeline_def.get("config", {}))
    except (TypeError, ValueError) as e:
        logger.error("Invalid config in %s: %s", config_path, e)
        return 1

    if args.output:
        config.output_dir = Path(args.output)
    if config.output_dir is None:
        config.output_dir = Path(".")

    inputs = pipeline_def.get("inputs", {})
    expression_path = inputs.get("expression")
    metadata_path = inputs.get("metadata")
    if not expression_path or not metadata_path:
        logger.error("Config needs inputs.expression and inputs.metadata")
        return 1
    missing = _missing(expression_path, metadata_path)
    if missing:
        logger.error("Input file not found: %s", missing)
        return 1

    expression = pd.read_csv(expression_path, index_col=0)
    metadata = pd.read_csv(metadata_path, index_col=0)

    pipeline = Pipeline(config=config)
    try:
        result = pipeline.run(expression, metadata)
    except ValueError as e:
        logger.error("Pipeline failed: %s", e)
        return 1

    logger.info("Run complete: %s", result.metrics)
    return 0


def cmd_aggregate(args: argparse.Namespace) -> int:
    """Aggregate per-sample TPM into body part summaries."""
    import pandas as pd
    from bodymap_pipeline.aggregation import BodyPartAggregator
    from bodymap_pipeline.core.config import AggregationConfig
    from bodymap_pipeline.export import CSVWriter

    missing = _missing(args.expression, args.metadata)
    if missing:
        logger.error("Input file not found: %s", missing)
        return 1

    expression = pd.read_csv(args.expression, index_col=0)
    metadata = pd.read_csv(args.metadata, index_col=0)

    try:
        config = AggregationConfig(
            body_part_col=args.body_part_col,
            min_mapping_rate=args.min_mapping_rate,
            min_samples=args.min_samples,
            method=args.method,
        )
        result = BodyPartAggregator(config).aggregate(expression, metadata)
    except ValueError as e:
        logger.error("Aggregation failed: %s", e)
        return 1

    writer = CSVWriter(Path(args.output or "."))
    out_path = writer.write_expression(result.expression)
    logger.info("Aggregated to %s (%d genes x %d body parts)",
                out_path, result.n_genes, result.n_parts)
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify genes of a genes x body parts matrix."""
    import pandas as pd
    from bodymap_pipeline.classification import ExpressionClassifier
    from bodymap_pipeline.core.config import ClassifierConfig
    from bodymap_pipeline.core.errors import InvalidInputError
    from bodymap_pipeline.export import CSVWriter

    missing = _missing(args.input, args.log_input)
    if missing:
        logger.error("Input file not found: %s", missing)
        return 1

    expression = pd.read_csv(args.input, index_col=0)
    log_expression = pd.read_csv(args.log_input, index_col=0) if args.log_input else None

    try:
        config = ClassifierConfig(
            expressed_threshold=args.expressed_threshold,
            stable_threshold=args.stable_threshold,
            specificity_threshold=args.specificity_threshold,
        )
        result = ExpressionClassifier(config).classify(expression, log_expression)
    except InvalidInputError as e:
        logger.error("Invalid expression matrix: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid thresholds: %s", e)
        return 1

    writer = CSVWriter(Path(args.output or "."))
    paths = writer.write_all(result)
    logger.info("Classification saved to %s (%d genes, %d Null)",
                paths["classification"], len(result), len(result.null_genes))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    from bodymap_pipeline.core.config import (
        EXPRESSED_THRESHOLD,
        SPECIFICITY_THRESHOLD,
        STABLE_THRESHOLD,
    )

    parser = argparse.ArgumentParser(
        prog="bodymap-pipeline",
        description="Body part expression aggregation and tissue-specificity classification",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--log-file", type=str, help="Log file path")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- run ---
    p_run = subparsers.add_parser("run", help="Run full pipeline from YAML config")
    p_run.add_argument("--config", required=True, help="Pipeline YAML config file")
    p_run.add_argument("--output", "-o", help="Output directory")
    p_run.set_defaults(func=cmd_run)

    # --- aggregate ---
    p_agg = subparsers.add_parser("aggregate", help="Aggregate samples by body part")
    p_agg.add_argument("--expression", "-e", required=True, help="Per-sample TPM CSV (genes x samples)")
    p_agg.add_argument("--metadata", "-m", required=True, help="Sample metadata CSV")
    p_agg.add_argument("--body-part-col", default="body_part", help="Body part column")
    p_agg.add_argument("--min-mapping-rate", type=float, default=0.0,
                       help="Drop samples mapping below this percentage")
    p_agg.add_argument("--min-samples", type=int, default=1,
                       help="Minimum samples per body part")
    p_agg.add_argument("--method", default="median", choices=["median", "mean"])
    p_agg.add_argument("--output", "-o", help="Output directory")
    p_agg.set_defaults(func=cmd_aggregate)

    # --- classify ---
    p_cls = subparsers.add_parser("classify", help="Classify genes by expression pattern")
    p_cls.add_argument("--input", "-i", required=True, help="Body part expression CSV")
    p_cls.add_argument("--log-input", help="Matching log-space CSV (default: log2(x+1))")
    p_cls.add_argument("--expressed-threshold", type=float, default=EXPRESSED_THRESHOLD)
    p_cls.add_argument("--stable-threshold", type=float, default=STABLE_THRESHOLD)
    p_cls.add_argument("--specificity-threshold", type=float, default=SPECIFICITY_THRESHOLD)
    p_cls.add_argument("--output", "-o", help="Output directory")
    p_cls.set_defaults(func=cmd_classify)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _setup_logging(verbose=args.verbose, log_file=args.log_file)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
