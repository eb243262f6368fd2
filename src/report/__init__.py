"""Result reporting: annotations, summary and output files."""

from report.annotations import Annotation, build_annotations
from report.summary import RunSummary, build_summary
from report.table import resource_table, summary_table
from report.write import write_results

__all__ = [
    "Annotation",
    "RunSummary",
    "build_annotations",
    "build_summary",
    "resource_table",
    "summary_table",
    "write_results",
]
