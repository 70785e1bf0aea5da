"""
Batch spike detection pipeline orchestration.

Coordinates the flow: read → extract → group by entity (sorted) → aggregate → write
"""

from typing import Any

from pyspark import RDD, StorageLevel
from pyspark.sql import SparkSession

from src.batch.readers import PagecountReader
from src.batch.shuffle import group_by_entity, to_shuffle_pair
from src.batch.writers import DiagnosticsWriter, SpikeResultWriter
from src.core.config import JobConfig
from src.core.extraction import Extractor
from src.core.models import RawRecord
from src.core.spike import SpikeAggregator
from src.observability import metrics
from src.observability.logger import get_logger, log_operation

logger = get_logger(__name__)

EXTRACTED = "extracted"
FILTERED = "filtered"
FAILED = "failed"


def extract_outcome(extractor: Extractor, raw: tuple[str, str]) -> tuple[str, str, Any]:
    """
    Extract one (line, source_file_name) pair into a tagged outcome.

    Args:
        extractor: Extractor to apply
        raw: Line and the base name of its source file

    Returns:
        (status, reason, payload) where payload is the NormalizedTuple when
        extracted, the ExtractionDiagnostic when failed and None when filtered
    """
    line, source_file_name = raw
    record = RawRecord(line=line, source_file_name=source_file_name)
    result = extractor.extract(record)

    if result.is_extracted:
        return EXTRACTED, "", result.record
    if result.is_failed:
        return FAILED, result.failure.reason, Extractor.to_diagnostic(record, result)
    return FILTERED, "", None


class SpikePipeline:
    """
    Orchestrates the pagecount spike detection job.

    Flow:
    1. Read hourly dump files with their file names
    2. Extract normalized tuples, tagging filtered and failed records
    3. Group tuples by entity, sorted by (day, hour) within each entity
    4. Aggregate each entity into its largest spike
    5. Write spike results, and diagnostics for failed records
    """

    def __init__(self, spark: SparkSession, config: JobConfig | None = None):
        """
        Initialize spike pipeline.

        Args:
            spark: Active Spark session
            config: Job configuration (defaults apply when omitted)
        """
        self.spark = spark
        self.config = config or JobConfig()

        self.reader = PagecountReader(spark)
        self.extractor = Extractor(language_code_length=self.config.language_code_length)
        self.aggregator = SpikeAggregator(
            lookback_days=self.config.lookback_days,
            verify_ordering=self.config.verify_ordering,
            defensive_sort=self.config.defensive_sort,
        )
        self.spike_writer = SpikeResultWriter(separator=self.config.output_separator)
        self.diagnostics_writer = DiagnosticsWriter()

    def extract(self, raw_records: RDD) -> RDD:
        """
        Tag every raw record with its extraction outcome.

        Args:
            raw_records: RDD of (line, source_file_name)

        Returns:
            RDD of (status, reason, payload)
        """
        # Closures must not capture self: it holds the SparkSession
        extractor = self.extractor
        return raw_records.map(lambda raw: extract_outcome(extractor, raw))

    def aggregate(self, outcomes: RDD) -> RDD:
        """
        Group extracted tuples by entity and compute one SpikeResult each.

        Args:
            outcomes: RDD produced by extract()

        Returns:
            RDD of SpikeResult
        """
        aggregator = self.aggregator
        pairs = outcomes \
            .filter(lambda outcome: outcome[0] == EXTRACTED) \
            .map(lambda outcome: to_shuffle_pair(outcome[2]))
        grouped = group_by_entity(pairs, self.config.shuffle_partitions)
        return grouped.map(lambda group: aggregator.aggregate_group(group[0], group[1]))

    @staticmethod
    def diagnostics(outcomes: RDD) -> RDD:
        """
        Select the diagnostics of failed records.

        Args:
            outcomes: RDD produced by extract()

        Returns:
            RDD of ExtractionDiagnostic
        """
        return outcomes \
            .filter(lambda outcome: outcome[0] == FAILED) \
            .map(lambda outcome: outcome[2])

    def compute(self, raw_records: RDD) -> tuple[RDD, RDD]:
        """
        Build the spike and diagnostics RDDs without writing anything.

        Args:
            raw_records: RDD of (line, source_file_name)

        Returns:
            Tuple of (SpikeResult RDD, ExtractionDiagnostic RDD)
        """
        outcomes = self.extract(raw_records)
        return self.aggregate(outcomes), self.diagnostics(outcomes)

    def run(
        self,
        input_path: str | list[str],
        output_path: str,
        diagnostics_path: str | None = None
    ) -> dict[str, Any]:
        """
        Process pagecount files through the complete pipeline.

        Args:
            input_path: Pagecount file, directory or glob
            output_path: Directory for spike results (must not exist)
            diagnostics_path: Directory for failed record diagnostics (optional)

        Returns:
            Dictionary with processing results:
            - total_records: Raw lines read
            - extracted_records: Lines turned into tuples
            - filtered_records: Lines dropped by the language filter
            - failed_records: Malformed lines dropped with a diagnostic
            - failures_by_reason: failed_records split by reason
            - entities: Spike results written
            - max_magnitude: Largest spike found
        """
        logger.info(f"Starting spike detection for input: {input_path}")

        try:
            summary = self._run(input_path, output_path, diagnostics_path)
        except Exception:
            metrics.record_run(success=False)
            raise

        metrics.record_run(success=True)
        if self.config.metrics_textfile:
            metrics.write_metrics_textfile(self.config.metrics_textfile)
            logger.info(f"Wrote metrics to {self.config.metrics_textfile}")

        logger.info("Spike detection complete", extra=summary)
        return summary

    def _run(
        self,
        input_path: str | list[str],
        output_path: str,
        diagnostics_path: str | None
    ) -> dict[str, Any]:
        raw_records = self.reader.read_records(input_path)
        outcomes = self.extract(raw_records).persist(StorageLevel.MEMORY_AND_DISK)

        try:
            # Step 1: Extract and count outcomes
            with log_operation("Extracting records", logger=logger) as op:
                counts = outcomes.map(lambda outcome: (outcome[0], outcome[1])).countByValue()
            metrics.record_stage_duration("extract", op.duration_seconds)
            metrics.record_extraction_outcomes(dict(counts))

            failures_by_reason = {
                reason: count for (status, reason), count in counts.items() if status == FAILED
            }
            extracted = sum(count for (status, _), count in counts.items() if status == EXTRACTED)
            filtered = sum(count for (status, _), count in counts.items() if status == FILTERED)
            failed = sum(failures_by_reason.values())
            logger.info(
                f"Extraction complete: {extracted} extracted, {filtered} filtered, {failed} failed"
            )
            if failed:
                logger.warning(f"Dropped {failed} malformed records", extra=failures_by_reason)

            # Step 2: Group by entity and aggregate
            spikes = self.aggregate(outcomes).persist(StorageLevel.MEMORY_AND_DISK)
            try:
                with log_operation("Aggregating entities", logger=logger) as op:
                    entities = spikes.count()
                    max_magnitude = spikes.map(lambda spike: spike.magnitude).max() if entities else 0
                metrics.record_stage_duration("aggregate", op.duration_seconds)
                metrics.record_aggregation(entities, max_magnitude)

                # Step 3: Write results
                with log_operation("Writing results", logger=logger, output_path=output_path) as op:
                    self.spike_writer.write(spikes, output_path)
                    if diagnostics_path and self.config.diagnostics_enabled:
                        self.diagnostics_writer.write(self.diagnostics(outcomes), diagnostics_path)
                metrics.record_stage_duration("write", op.duration_seconds)
            finally:
                spikes.unpersist()
        finally:
            outcomes.unpersist()

        return {
            "total_records": extracted + filtered + failed,
            "extracted_records": extracted,
            "filtered_records": filtered,
            "failed_records": failed,
            "failures_by_reason": failures_by_reason,
            "entities": entities,
            "max_magnitude": max_magnitude,
        }
