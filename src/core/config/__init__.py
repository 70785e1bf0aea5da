"""
Job configuration loading.
"""

from .job_config import ConfigError, JobConfig, JobConfigLoader, load_job_config

__all__ = [
    "JobConfig",
    "JobConfigLoader",
    "ConfigError",
    "load_job_config",
]
