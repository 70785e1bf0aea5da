"""
Command-line interface for the pagecount spike job.

Usage:
    python -m src.cli.batch_cli process --input <path> --output <dir> [options]
"""

import argparse
import sys

from pyspark.sql import SparkSession

from src.batch.pipeline import SpikePipeline
from src.core.config import ConfigError, JobConfig, load_job_config
from src.core.config.job_config import build_config
from src.observability.logger import get_logger


logger = get_logger(__name__)


def create_spark_session(config: JobConfig) -> SparkSession:
    """
    Create Spark session for the spike job.

    Args:
        config: Job configuration

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(config.app_name) \
        .master(config.spark_master) \
        .config("spark.sql.shuffle.partitions", str(config.shuffle_partitions)) \
        .config("spark.sql.adaptive.enabled", "true") \
        .getOrCreate()

    return spark


def resolve_config(args: argparse.Namespace) -> JobConfig:
    """
    Load the job configuration and apply command-line overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        JobConfig
    """
    config = load_job_config(args.config, env_file=args.env_file)

    overrides = {}
    if args.lookback_days is not None:
        overrides["lookback_days"] = args.lookback_days
    if args.partitions is not None:
        overrides["shuffle_partitions"] = args.partitions
    if args.master:
        overrides["spark_master"] = args.master
    if args.defensive_sort:
        overrides["defensive_sort"] = True
    if args.metrics_textfile:
        overrides["metrics_textfile"] = args.metrics_textfile

    if not overrides:
        return config
    return build_config({**config.model_dump(), **overrides})


def process_command(args: argparse.Namespace) -> int:
    """
    Execute the spike detection command.

    Args:
        args: Command-line arguments

    Returns:
        Process exit status
    """
    try:
        config = resolve_config(args)
    except (ConfigError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Input: {args.input}")
    logger.info(f"Output: {args.output}")

    logger.info("Creating Spark session...")
    spark = create_spark_session(config)

    try:
        pipeline = SpikePipeline(spark=spark, config=config)
        result = pipeline.run(
            input_path=args.input,
            output_path=args.output,
            diagnostics_path=args.diagnostics,
        )

        logger.info("=" * 60)
        logger.info("PROCESSING COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total records read: {result['total_records']}")
        logger.info(f"Extracted records: {result['extracted_records']}")
        logger.info(f"Filtered records (language code): {result['filtered_records']}")
        logger.info(f"Malformed records dropped: {result['failed_records']}")
        logger.info(f"Entities written: {result['entities']}")
        logger.info(f"Largest spike: {result['max_magnitude']}")
        logger.info("=" * 60)

    except Exception as e:
        logger.error(f"Error during spike detection: {e}", exc_info=True)
        return 1
    finally:
        spark.stop()

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Largest daily page view spike per Wikipedia page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process 60 days of hourly dumps
  python -m src.cli.batch_cli process --input data/pagecounts/ --output out/spikes

  # Keep malformed records for inspection
  python -m src.cli.batch_cli process --input data/pagecounts/ --output out/spikes \\
      --diagnostics out/diagnostics

  # Sort each page's values instead of trusting the shuffle order
  python -m src.cli.batch_cli process --input data/pagecounts/ --output out/spikes \\
      --defensive-sort
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Detect spikes in pagecount dumps")
    process_parser.add_argument(
        "--input",
        required=True,
        help="Pagecount file, directory or glob"
    )
    process_parser.add_argument(
        "--output",
        required=True,
        help="Output directory for spike results (must not exist)"
    )
    process_parser.add_argument(
        "--diagnostics",
        help="Output directory for malformed record diagnostics (JSON lines)"
    )
    process_parser.add_argument(
        "--config",
        help="Path to job configuration YAML (default: config/job.yaml if present)"
    )
    process_parser.add_argument(
        "--env-file",
        help="Path to a .env file with SPIKE_* settings (default: .env if present)"
    )
    process_parser.add_argument(
        "--lookback-days",
        type=int,
        help="Offsets scanned per day by the spike scan (default: 5)"
    )
    process_parser.add_argument(
        "--partitions",
        type=int,
        help="Number of partitions used to group pages"
    )
    process_parser.add_argument(
        "--master",
        help="Spark master URL (default: local[*])"
    )
    process_parser.add_argument(
        "--defensive-sort",
        action="store_true",
        help="Sort each page's hourly values before aggregating"
    )
    process_parser.add_argument(
        "--metrics-textfile",
        help="Write Prometheus metrics to this file after the run"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "process":
        return process_command(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
