"""
Pagecount reader using Spark for batch processing.

Reads hourly dump files (plain or gzip) and keeps the base name of the file
each line came from, since the collection day and hour live only there.
"""

from pyspark import RDD
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import col, element_at, input_file_name, split


class PagecountReader:
    """
    Reads pagecount text files into (line, source_file_name) records.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize pagecount reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(self, input_path: str | list[str]) -> DataFrame:
        """
        Read pagecount files into a Spark DataFrame.

        Args:
            input_path: File, directory or glob (or a list of them)

        Returns:
            DataFrame with columns line and source_file_name
        """
        df = self.spark.read.text(input_path)

        return df.select(
            col("value").alias("line"),
            element_at(split(input_file_name(), "/"), -1).alias("source_file_name"),
        )

    def read_records(self, input_path: str | list[str]) -> RDD:
        """
        Read pagecount files as an RDD of (line, source_file_name) tuples.

        Args:
            input_path: File, directory or glob (or a list of them)

        Returns:
            RDD of (line, source_file_name)
        """
        return self.read(input_path).rdd.map(lambda row: (row.line, row.source_file_name))
