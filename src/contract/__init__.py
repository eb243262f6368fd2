"""Data contract shared across the validator packages."""

from contract.artifacts import (
    ANNOTATIONS_JSONL,
    RESULT_FILE_SPECS,
    RESULT_SCHEMA_VERSION,
    SUMMARY_JSON,
    ResultFileSpec,
)
from contract.models import (
    SCOPE_SEPARATOR,
    Reference,
    ReferenceTable,
    ResourceViolation,
    Symbol,
    SymbolTable,
)

__all__ = [
    "ANNOTATIONS_JSONL",
    "RESULT_FILE_SPECS",
    "RESULT_SCHEMA_VERSION",
    "SCOPE_SEPARATOR",
    "SUMMARY_JSON",
    "Reference",
    "ReferenceTable",
    "ResourceViolation",
    "ResultFileSpec",
    "Symbol",
    "SymbolTable",
]
