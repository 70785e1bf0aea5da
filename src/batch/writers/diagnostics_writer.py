"""
Diagnostics writer for records dropped during extraction.

Writes one JSON document per failed record.
"""

from pyspark import RDD


class DiagnosticsWriter:
    """
    Writes ExtractionDiagnostic RDDs as JSON lines.
    """

    def write(self, diagnostics: RDD, output_path: str) -> None:
        """
        Save diagnostics as JSON lines.

        Args:
            diagnostics: RDD of ExtractionDiagnostic
            output_path: Output directory; must not exist yet
        """
        diagnostics.map(lambda diagnostic: diagnostic.model_dump_json()).saveAsTextFile(output_path)
