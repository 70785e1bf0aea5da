"""
Spike result writer.

Writes one text line per entity: "<entity_key><separator><day1> <day2> <magnitude>".
"""

from pyspark import RDD


class SpikeResultWriter:
    """
    Writes SpikeResult RDDs as text part files.
    """

    def __init__(self, separator: str = "\t"):
        """
        Initialize spike result writer.

        Args:
            separator: Separator between entity key and value
        """
        self.separator = separator

    def write(self, results: RDD, output_path: str) -> None:
        """
        Save spike results as text.

        Args:
            results: RDD of SpikeResult
            output_path: Output directory; must not exist yet
        """
        separator = self.separator
        results.map(lambda result: result.to_output_line(separator)).saveAsTextFile(output_path)
