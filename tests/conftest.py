"""
Pytest configuration and fixtures for pagecount spike tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import gzip
import os
from pathlib import Path
from typing import Callable, Generator

import pytest

from src.core.models import ExtractionDiagnostic, NormalizedTuple, SpikeResult

REPO_ROOT = Path(__file__).resolve().parent.parent


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require Spark"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that run a local Spark session"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the full job on files"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session():
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    from pyspark.sql import SparkSession

    # Python workers must be able to import the src package
    python_path = os.environ.get("PYTHONPATH", "")
    if str(REPO_ROOT) not in python_path.split(os.pathsep):
        os.environ["PYTHONPATH"] = os.pathsep.join(p for p in [str(REPO_ROOT), python_path] if p)

    spark = (
        SparkSession.builder
        .appName("pagecount-spikes-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .config("spark.sql.warehouse.dir", "/tmp/spark-warehouse")
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# DATA FIXTURES
# =======================

@pytest.fixture
def make_tuple() -> Callable[..., NormalizedTuple]:
    """
    Factory for NormalizedTuple with sensible defaults

    Returns:
        Function building a NormalizedTuple
    """
    def _make(day: str, hour: str = "00", view_count: int = 1, entity_key: str = "enMain_Page"):
        return NormalizedTuple(entity_key=entity_key, day=day, hour=hour, view_count=view_count)

    return _make


@pytest.fixture
def pagecount_dir(tmp_path) -> Callable[..., Path]:
    """
    Factory writing hourly pagecount dumps into a temporary directory

    Usage:
        path = pagecount_dir({"pagecounts-20140601-000000": ["en Main_Page 42 50043"]})

    Returns:
        Function taking {file_name: [lines]} and returning the directory
    """
    input_dir = tmp_path / "pagecounts"
    input_dir.mkdir()

    def _write(files: dict[str, list[str]]) -> Path:
        for file_name, lines in files.items():
            content = "\n".join(lines) + "\n"
            if file_name.endswith(".gz"):
                with gzip.open(input_dir / file_name, "wt") as f:
                    f.write(content)
            else:
                (input_dir / file_name).write_text(content)
        return input_dir

    return _write


@pytest.fixture
def read_spikes() -> Callable[..., list[SpikeResult]]:
    """
    Reader for the part files of a local spike output directory

    Returns:
        Function taking the output directory and returning results sorted by entity key
    """
    def _read(output_path: Path, separator: str = "\t") -> list[SpikeResult]:
        results = [
            SpikeResult.from_output_line(line, separator)
            for part in sorted(Path(output_path).glob("part-*"))
            for line in part.read_text().splitlines()
            if line.strip()
        ]
        return sorted(results, key=lambda result: result.entity_key)

    return _read


@pytest.fixture
def read_diagnostics() -> Callable[[Path], list[ExtractionDiagnostic]]:
    """
    Reader for the JSON-lines part files of a local diagnostics directory

    Returns:
        Function taking the output directory and returning diagnostics in file order
    """
    def _read(output_path: Path) -> list[ExtractionDiagnostic]:
        return [
            ExtractionDiagnostic.model_validate_json(line)
            for part in sorted(Path(output_path).glob("part-*"))
            for line in part.read_text().splitlines()
            if line.strip()
        ]

    return _read


@pytest.fixture
def clean_spike_env(monkeypatch) -> Generator[None, None, None]:
    """
    Remove SPIKE_* overrides so config tests start from the file only
    """
    for name in list(os.environ):
        if name.startswith("SPIKE_"):
            monkeypatch.delenv(name, raising=False)
    yield
