"""
Job configuration management.

Loads spike job settings from a YAML file, applies environment variable
overrides and validates the result with Pydantic.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from src.core.spike.window_scan import LOOKBACK_DAYS

ENV_PREFIX = "SPIKE_"
DEFAULT_CONFIG_PATH = "config/job.yaml"
DEFAULT_ENV_FILE = ".env"


class ConfigError(ValueError):
    """Raised when the job configuration cannot be loaded or is invalid."""
    pass


class JobConfig(BaseModel):
    """
    Execution settings for one spike detection run.

    Attributes:
        app_name: Spark application name
        spark_master: Spark master URL
        shuffle_partitions: Partitions used when grouping tuples by entity
        lookback_days: Offsets scanned per day by the windowed scan
        language_code_length: Exact language code length kept by the extractor
        verify_ordering: Check that grouped tuples arrive in (day, hour) order
        defensive_sort: Sort each entity's tuples before aggregating
        diagnostics_enabled: Write failed records to the diagnostics output
        output_separator: Separator between entity key and value in the output
        metrics_textfile: Where to write Prometheus metrics after the run
    """

    app_name: str = "pagecount-spikes"
    spark_master: str = "local[*]"
    shuffle_partitions: int = Field(8, ge=1)
    lookback_days: int = Field(LOOKBACK_DAYS, ge=1)
    language_code_length: int = Field(2, ge=1)
    verify_ordering: bool = True
    defensive_sort: bool = False
    diagnostics_enabled: bool = True
    output_separator: str = Field("\t", min_length=1)
    metrics_textfile: str | None = None

    class Config:
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "app_name": "pagecount-spikes",
                "spark_master": "local[*]",
                "shuffle_partitions": 8,
                "lookback_days": 5,
                "language_code_length": 2,
                "verify_ordering": True,
                "defensive_sort": False,
                "diagnostics_enabled": True,
                "output_separator": "\t",
                "metrics_textfile": "/var/lib/node_exporter/pagecount_spikes.prom"
            }
        }


class JobConfigLoader:
    """
    Loads job settings from a YAML configuration file.

    Expected YAML format:
    ```yaml
    job:
      app_name: pagecount-spikes
      shuffle_partitions: 64
      lookback_days: 5
      defensive_sort: false
    ```

    Environment variables named SPIKE_<FIELD> (e.g. SPIKE_SHUFFLE_PARTITIONS)
    override values from the file.
    """

    def __init__(self, config_path: str | Path, env_file: str | Path | None = None):
        """
        Initialize the job config loader.

        Args:
            config_path: Path to the YAML configuration file
            env_file: Optional .env file loaded before reading overrides
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Job configuration file not found: {config_path}")
        self.env_file = env_file

    def load(self) -> JobConfig:
        """
        Load, override and validate the job configuration.

        Returns:
            JobConfig

        Raises:
            ConfigError: If the YAML is invalid or a setting fails validation
        """
        try:
            with open(self.config_path) as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not config or "job" not in config:
            raise ConfigError("Configuration file must contain 'job' section")

        settings = config["job"] or {}
        if not isinstance(settings, dict):
            raise ConfigError("'job' section must be a mapping")

        if self.env_file:
            load_dotenv(self.env_file, override=False)
        settings = {**settings, **env_overrides()}

        return build_config(settings)


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Collect SPIKE_* environment variables that name a JobConfig field.

    Args:
        environ: Environment to read (defaults to os.environ)

    Returns:
        Mapping of field name to raw string value
    """
    environ = os.environ if environ is None else environ
    overrides = {}
    for field_name in JobConfig.model_fields:
        value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            overrides[field_name] = value
    return overrides


def build_config(settings: dict[str, Any]) -> JobConfig:
    """
    Validate raw settings into a JobConfig.

    Raises:
        ConfigError: If a setting is unknown or invalid
    """
    try:
        return JobConfig(**settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid job configuration: {e}") from e


def load_job_config(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> JobConfig:
    """
    Load the job configuration, falling back to defaults when no file exists.

    A .env file is loaded into the environment before SPIKE_* overrides are
    read. Variables already set in the environment take precedence over it.

    Args:
        config_path: YAML file; defaults to config/job.yaml
        env_file: .env file; defaults to .env in the working directory

    Returns:
        JobConfig
    """
    env_path = Path(env_file or DEFAULT_ENV_FILE)
    if env_path.exists():
        load_dotenv(env_path, override=False)
    elif env_file:
        raise FileNotFoundError(f"Environment file not found: {env_file}")

    path = Path(config_path or DEFAULT_CONFIG_PATH)
    if path.exists():
        return JobConfigLoader(path).load()
    if config_path:
        raise FileNotFoundError(f"Job configuration file not found: {config_path}")
    return build_config(env_overrides())
