"""Aggregate run summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from contract.artifacts import RESULT_SCHEMA_VERSION

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.resources import ResourceCategory
    from scan.sources import ParseUnit


class UnitResult(BaseModel):
    """Outcome for one root source list."""

    filename: str
    type: str
    version: int
    naming_violations: int
    reference_violations: int
    overwrite_violations: int
    num_symbols: int = Field(description="Symbols declared by the patch itself")
    duration: float = Field(description="Parse and validation time in seconds")

    @property
    def num_violations(self) -> int:
        return self.naming_violations + self.reference_violations + self.overwrite_violations

    @property
    def passed(self) -> bool:
        return self.num_violations == 0


class ResourceResult(BaseModel):
    """Outcome for one resource category."""

    name: str
    extensions: list[str]
    num_files: int
    extension_violations: int
    naming_violations: int
    duration: float

    @property
    def num_violations(self) -> int:
        return self.extension_violations + self.naming_violations

    @property
    def passed(self) -> bool:
        return self.num_violations == 0


class RunSummary(BaseModel):
    schema_version: int = RESULT_SCHEMA_VERSION
    patch_name: str
    prefixes: list[str] = Field(default_factory=list)
    units: list[UnitResult] = Field(default_factory=list)
    resources: list[ResourceResult] = Field(default_factory=list)
    num_symbols: int = 0
    num_violations: int = 0
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return self.num_violations == 0


def unit_result(unit: ParseUnit) -> UnitResult:
    return UnitResult(
        filename=unit.filename,
        type=unit.type,
        version=unit.version,
        naming_violations=len(unit.naming_violations),
        reference_violations=len(unit.reference_violations),
        overwrite_violations=len(unit.overwrite_violations),
        num_symbols=unit.num_symbols,
        duration=unit.duration,
    )


def resource_result(category: ResourceCategory) -> ResourceResult:
    return ResourceResult(
        name=category.name,
        extensions=list(category.extensions),
        num_files=category.num_files,
        extension_violations=len(category.ext_violations),
        naming_violations=len(category.name_violations),
        duration=category.duration,
    )


def build_summary(
    patch_name: str,
    units: Sequence[ParseUnit],
    resources: Sequence[ResourceCategory],
    prefixes: Sequence[str],
    duration: float,
) -> RunSummary:
    """Summarise a finished run.

    Args:
        patch_name: Name of the validated patch
        units: Validated parse units
        resources: Validated, non-empty resource categories
        prefixes: Formatted prefixes used by the naming checks
        duration: Total run time in seconds

    Returns:
        Summary with one row per unit and resource category plus totals
    """
    unit_rows = [unit_result(unit) for unit in units]
    resource_rows = [resource_result(category) for category in resources]
    return RunSummary(
        patch_name=patch_name,
        prefixes=list(prefixes),
        units=unit_rows,
        resources=resource_rows,
        num_symbols=sum(row.num_symbols for row in unit_rows),
        num_violations=sum(row.num_violations for row in unit_rows)
        + sum(row.num_violations for row in resource_rows),
        duration=duration,
    )


__all__ = ["ResourceResult", "RunSummary", "UnitResult", "build_summary"]
