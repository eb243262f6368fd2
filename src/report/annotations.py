"""Line-anchored annotations built from validation results."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contract.models import Reference, ResourceViolation, Symbol
    from rules.resources import ResourceCategory
    from scan.sources import ParseUnit

AnnotationLevel = Literal["failure", "warning", "notice"]

# Number of prefixes quoted as examples in messages.
EXAMPLE_PREFIXES = 3

SYMBOL_LOOKUP_SNIPPET = """\
if (MEM_FindParserSymbol("{name}") != -1) {{
    var zCPar_Symbol symb; symb = _^(MEM_GetSymbol("{name}"));
    // Access content with symb.content
}} else {{
    // Fallback to a default if the symbol does not exist
}};"""


class Annotation(BaseModel):
    """A single finding anchored to a file and line."""

    path: str = Field(description="File path relative to the working directory")
    start_line: int
    end_line: int
    annotation_level: AnnotationLevel = "failure"
    title: str
    message: str
    raw_details: str | None = Field(default=None, description="Suggested fix")


def _source_line(working_dir: Path, file: str, line: int) -> str:
    try:
        lines = (working_dir / file).read_text(encoding="latin-1").splitlines()
    except OSError:
        return ""
    if 0 < line <= len(lines):
        return lines[line - 1]
    return ""


def suggest_prefixed(source_line: str, name: str, prefix: str) -> str:
    """Insert ``prefix`` before every whole-word occurrence of ``name``."""
    pattern = re.compile(rf"(?<![\w])({re.escape(name)})(?![\w])", re.IGNORECASE)
    return pattern.sub(lambda m: f"{prefix}{m.group(1)}", source_line)


def naming_annotation(
    symbol: Symbol, prefix: Sequence[str], working_dir: Path
) -> Annotation:
    examples = ", ".join(prefix[:EXAMPLE_PREFIXES])
    context = _source_line(working_dir, symbol.source_file, symbol.line)
    return Annotation(
        path=symbol.source_file,
        start_line=symbol.line,
        end_line=symbol.line,
        title=f"Naming convention violation: {symbol.name}",
        message=(
            f'The symbol "{symbol.name}" poses a compatibility risk. Add a prefix to '
            f"its name (e.g. {examples}). If overwriting this symbol is intended, "
            "add it to the ignore list."
        ),
        raw_details=suggest_prefixed(context, symbol.name, prefix[0]) if prefix else context,
    )


def reference_annotation(reference: Reference) -> Annotation:
    return Annotation(
        path=reference.source_file,
        start_line=reference.line,
        end_line=reference.line,
        title=f"Reference violation: {reference.name}",
        message=(
            f'The symbol "{reference.name}" might not exist ("Unknown identifier"). '
            "Reference only symbols that are declared in the patch or safely search "
            "for other symbols by their name."
        ),
        raw_details=SYMBOL_LOOKUP_SNIPPET.format(name=reference.name),
    )


def overwrite_annotation(symbol: Symbol) -> Annotation:
    return Annotation(
        path=symbol.source_file,
        start_line=symbol.line,
        end_line=symbol.line,
        title=f"Overwrite violation: {symbol.name}",
        message=f'The symbol "{symbol.name}" is not allowed to be re-declared / defined.',
    )


def extension_annotation(
    violation: ResourceViolation, category: ResourceCategory
) -> Annotation:
    allowed = ", ".join(category.extensions)
    return Annotation(
        path=violation.file,
        start_line=violation.line,
        end_line=violation.line,
        title=f"Extension violation: {violation.name}",
        message=(
            f'The file "{violation.file}" has an unexpected extension for '
            f"{category.name.lower()}. Allowed extensions are: {allowed}."
        ),
    )


def resource_naming_annotation(
    violation: ResourceViolation, prefix: Sequence[str]
) -> Annotation:
    examples = ", ".join(prefix[:EXAMPLE_PREFIXES])
    return Annotation(
        path=violation.file,
        start_line=violation.line,
        end_line=violation.line,
        title=f"Naming convention violation: {violation.name}",
        message=(
            f'The resource file "{violation.name}" poses a compatibility risk. Add a '
            f"prefix to its name (e.g. {examples}). If overwriting this file is "
            "intended, add it to the ignore list."
        ),
    )


def build_annotations(
    units: Sequence[ParseUnit],
    resources: Sequence[ResourceCategory],
    prefix: Sequence[str],
    working_dir: Path,
) -> list[Annotation]:
    """Collect annotations for every violation, units first, then resources."""
    annotations: list[Annotation] = []
    for unit in units:
        annotations.extend(naming_annotation(v, prefix, working_dir) for v in unit.naming_violations)
        annotations.extend(reference_annotation(v) for v in unit.reference_violations)
        annotations.extend(overwrite_annotation(v) for v in unit.overwrite_violations)
    for category in resources:
        annotations.extend(extension_annotation(v, category) for v in category.ext_violations)
        annotations.extend(resource_naming_annotation(v, prefix) for v in category.name_violations)
    return annotations


__all__ = [
    "Annotation",
    "build_annotations",
    "extension_annotation",
    "naming_annotation",
    "overwrite_annotation",
    "reference_annotation",
    "resource_naming_annotation",
    "suggest_prefixed",
]
