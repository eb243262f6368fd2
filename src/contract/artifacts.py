"""Output file contract for validation results."""

from __future__ import annotations

from dataclasses import dataclass

# Result schema version written into summary.json.
RESULT_SCHEMA_VERSION = 1

SUMMARY_JSON = "summary.json"
ANNOTATIONS_JSONL = "annotations.jsonl"


@dataclass(frozen=True)
class ResultFileSpec:
    """Filename and format of one result file."""

    filename: str
    format: str


RESULT_FILE_SPECS: dict[str, ResultFileSpec] = {
    "summary": ResultFileSpec(filename=SUMMARY_JSON, format="json"),
    "annotations": ResultFileSpec(filename=ANNOTATIONS_JSONL, format="jsonl"),
}
