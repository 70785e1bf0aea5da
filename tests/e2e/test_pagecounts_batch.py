"""
End-to-end tests: hourly dump files in, spike lines and diagnostics out.
"""

import os

import pytest

from src.batch.pipeline import SpikePipeline
from src.cli import batch_cli
from src.cli.batch_cli import build_parser, main, resolve_config
from src.core.config import JobConfig
from src.core.models import SpikeResult

HOURLY_DUMPS = {
    "pagecounts-20140601-000000.gz": ["en Main_Page 60 1", "de Berlin 50 1", "de.d Freiheit 176 314159"],
    "pagecounts-20140601-010000.gz": ["en Main_Page 40 1", "de Berlin 50 1"],
    "pagecounts-20140602-000000.gz": ["en Main_Page 100 1", "de Berlin 90 1"],
    "pagecounts-20140603-000000.gz": ["en Main_Page 50 1", "de Berlin 80 1", "en broken_line"],
    "pagecounts-20140604-000000.gz": ["en Main_Page 90 1", "de Berlin 70 1"],
    "pagecounts-20140605-000000.gz": ["en Main_Page 120 1", "en   Main_Page   80   1"],
    "pagecounts-20140606-000000.gz": ["en Main_Page 40 1"],
    "notes-20140606-000000.txt": ["en Main_Page 999999 1"],
}


@pytest.mark.e2e
@pytest.mark.slow
def test_pipeline_run_writes_spikes_and_diagnostics(
    spark_session, pagecount_dir, tmp_path, read_spikes, read_diagnostics
):
    """Test the complete run on files, including drops and summary counts"""
    input_dir = pagecount_dir(HOURLY_DUMPS)
    output_dir = tmp_path / "spikes"
    diagnostics_dir = tmp_path / "diagnostics"

    summary = SpikePipeline(spark_session, JobConfig(shuffle_partitions=2)).run(
        input_path=str(input_dir),
        output_path=str(output_dir),
        diagnostics_path=str(diagnostics_dir),
    )

    assert summary["total_records"] == 16
    assert summary["extracted_records"] == 13
    assert summary["filtered_records"] == 1
    assert summary["failed_records"] == 2
    assert summary["failures_by_reason"] == {
        "malformed_record": 1,
        "malformed_source_identifier": 1,
    }
    assert summary["entities"] == 2
    assert summary["max_magnitude"] == 150

    assert read_spikes(output_dir) == [
        SpikeResult(entity_key="deBerlin", day1="20140601", day2="20140601", magnitude=0),
        SpikeResult(entity_key="enMain_Page", day1="20140603", day2="20140605", magnitude=150),
    ]

    diagnostics = read_diagnostics(diagnostics_dir)
    assert sorted((d.reason, d.source_file_name) for d in diagnostics) == [
        ("malformed_record", "pagecounts-20140603-000000.gz"),
        ("malformed_source_identifier", "notes-20140606-000000.txt"),
    ]


@pytest.mark.e2e
@pytest.mark.slow
def test_cli_process_command(pagecount_dir, tmp_path, clean_spike_env, spark_session, monkeypatch):
    """Test the CLI end to end on the shared local session"""
    monkeypatch.setattr(batch_cli, "create_spark_session", lambda config: spark_session)
    monkeypatch.setattr(spark_session, "stop", lambda: None)

    input_dir = pagecount_dir(HOURLY_DUMPS)
    output_dir = tmp_path / "cli-spikes"

    exit_code = main([
        "process",
        "--input", str(input_dir),
        "--output", str(output_dir),
        "--master", "local[2]",
        "--partitions", "2",
        "--metrics-textfile", str(tmp_path / "spikes.prom"),
    ])

    assert exit_code == 0
    lines = sorted(
        line
        for part in output_dir.glob("part-*")
        for line in part.read_text().splitlines()
        if line
    )
    assert lines == [
        "deBerlin\t20140601 20140601 0",
        "enMain_Page\t20140603 20140605 150",
    ]
    assert "spikes_entities_aggregated_total" in (tmp_path / "spikes.prom").read_text()


@pytest.mark.e2e
def test_cli_flags_override_config(clean_spike_env, tmp_path):
    config_path = tmp_path / "job.yaml"
    config_path.write_text("job:\n  lookback_days: 5\n  shuffle_partitions: 4\n")

    args = build_parser().parse_args([
        "process", "--input", "in", "--output", "out",
        "--config", str(config_path),
        "--lookback-days", "3",
        "--defensive-sort",
    ])
    config = resolve_config(args)

    assert config.lookback_days == 3
    assert config.defensive_sort is True
    assert config.shuffle_partitions == 4


@pytest.mark.e2e
def test_cli_rejects_invalid_config(clean_spike_env, tmp_path):
    config_path = tmp_path / "job.yaml"
    config_path.write_text("job:\n  lookback_days: 0\n")

    assert main([
        "process", "--input", "in", "--output", "out", "--config", str(config_path)
    ]) == 2


@pytest.mark.e2e
def test_cli_without_command_prints_help(capsys):
    assert main([]) == 1
    assert "process" in capsys.readouterr().out


@pytest.mark.e2e
def test_cli_env_file_feeds_config(clean_spike_env, tmp_path):
    config_path = tmp_path / "job.yaml"
    config_path.write_text("job:\n  lookback_days: 5\n")
    env_file = tmp_path / "job.env"
    env_file.write_text("SPIKE_LOOKBACK_DAYS=4\n")

    args = build_parser().parse_args([
        "process", "--input", "in", "--output", "out",
        "--config", str(config_path),
        "--env-file", str(env_file),
    ])
    try:
        config = resolve_config(args)
    finally:
        os.environ.pop("SPIKE_LOOKBACK_DAYS", None)

    assert config.lookback_days == 4


@pytest.mark.e2e
def test_cli_rejects_missing_env_file(clean_spike_env, tmp_path):
    assert main([
        "process", "--input", "in", "--output", "out",
        "--env-file", str(tmp_path / "absent.env"),
    ]) == 2
