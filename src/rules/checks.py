"""Naming, reference and overwrite checks over a parsed unit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contract.models import SCOPE_SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import Reference, Symbol
    from scan.sources import ParseUnit

logger = logging.getLogger(__name__)

# Engine and framework globals a content patch must never redeclare.
OVERWRITE_PROTECTED = (
    "INIT_GLOBAL",
    "INITPERCEPTIONS",
    "REPEAT",
    "WHILE",
    "MEM_LABEL",
    "MEM_GOTO",
    "ALLOWSAVING",
    "ONALLOWSAVING",
    "ONDISALLOWSAVING",
    "FOCUSNAMES_COLOR_FRIENDLY",
    "FOCUSNAMES_COLOR_NEUTRAL",
    "FOCUSNAMES_COLOR_ANGRY",
    "FOCUSNAMES_COLOR_HOSTILE",
    "_FOCUSNAMES",
    "BW_SAVEGAME",
    "BR_SAVEGAME",
    "CURSOR_TEXTURE",
    "PF_FONT",
    "PRINT_LINESEPERATOR",
    "DIAG_PREFIX",
    "DIAG_SUFFIX",
    "BLOODSPLAT_NUM",
    "BLOODSPLAT_TEX",
    "BLOODSPLAT_DAM",
    "BUFFS_DISPLAYFORHERO",
    "BUFF_FADEOUT",
    "PF_PRINTX",
    "PF_PRINTY",
    "PF_TEXTHEIGHT",
    "PF_FADEINTIME",
    "PF_FADEOUTTIME",
    "PF_MOVEYTIME",
    "PF_WAITTIME",
    "AIV_TALENT_INDEX",
    "AIV_TALENT",
    "NINJA_SYMBOLS_START",
    "NINJA_SYMBOLS_END",
    "NINJA_VERSION",
    "NINJA_PATCHES",
    "NINJA_MODNAME",
)


def overwrite_protected(patch_name: str) -> frozenset[str]:
    """Reserved names including the patch-scoped Ninja markers."""
    patch = patch_name.upper()
    return frozenset(
        (*OVERWRITE_PROTECTED, f"NINJA_SYMBOLS_START_{patch}", f"NINJA_SYMBOLS_END_{patch}")
    )


def find_naming_violations(
    symbols: Iterable[Symbol],
    prefixes: list[str],
    ignore: Iterable[str] = (),
) -> list[Symbol]:
    """Return patch globals whose name carries none of ``prefixes``.

    Args:
        symbols: Symbol table of a parsed unit
        prefixes: Upper-case prefixes; any substring match passes
        ignore: Upper-case names that are always accepted

    Returns:
        Violating symbols in declaration order
    """
    ignored = frozenset(ignore)
    return [
        symbol
        for symbol in symbols
        if symbol.in_patch
        and symbol.is_global
        and not any(prefix in symbol.name.upper() for prefix in prefixes)
        and symbol.name.upper() not in ignored
    ]


def find_reference_violations(
    references: Iterable[Reference], symbols: Iterable[Symbol]
) -> list[Reference]:
    """Return patch references that resolve to no known symbol.

    A reference that only resolves after dropping its leading scope segment
    is renamed in place to the shorter name. Only one segment is dropped.
    """
    known = {symbol.name for symbol in symbols}
    violations: list[Reference] = []
    for reference in references:
        if not reference.in_patch or reference.name in known:
            continue
        _, separator, remainder = reference.name.partition(SCOPE_SEPARATOR)
        if separator and remainder in known:
            reference.name = remainder
            continue
        violations.append(reference)
    return violations


def find_overwrite_violations(
    unit_type: str, patch_name: str, symbols: Iterable[Symbol]
) -> list[Symbol]:
    """Return patch symbols redeclaring a reserved name (content only)."""
    if unit_type != "CONTENT":
        return []
    reserved = overwrite_protected(patch_name)
    return [symbol for symbol in symbols if symbol.in_patch and symbol.name in reserved]


def validate_unit(unit: ParseUnit, prefixes: list[str], ignore: list[str]) -> ParseUnit:
    """Run all three passes and store the results on ``unit``."""
    unit.naming_violations = find_naming_violations(unit.symbol_table, prefixes, ignore)
    unit.reference_violations = find_reference_violations(
        unit.reference_table, unit.symbol_table
    )
    unit.overwrite_violations = find_overwrite_violations(
        unit.type, unit.patch_name, unit.symbol_table
    )
    logger.info(
        "%s: %d naming, %d reference, %d overwrite violation(s)",
        unit.filename,
        len(unit.naming_violations),
        len(unit.reference_violations),
        len(unit.overwrite_violations),
    )
    return unit


__all__ = [
    "OVERWRITE_PROTECTED",
    "find_naming_violations",
    "find_overwrite_violations",
    "find_reference_violations",
    "overwrite_protected",
    "validate_unit",
]
