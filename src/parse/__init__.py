"""Daedalus front end and symbol table construction."""

from parse.parser import DaedalusSyntaxError, parse_to_tree
from parse.symbols import collect_symbols, extract_tables

__all__ = [
    "DaedalusSyntaxError",
    "collect_symbols",
    "extract_tables",
    "parse_to_tree",
]
