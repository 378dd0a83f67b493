"""Text-level parsing: payload syntax, error ranges, specification documents."""

from reqlint.parser.loader import SpecLoader
from reqlint.parser.ranges import find_error_ranges, merge_ranges, split_highlights
from reqlint.parser.syntax import parse_json, validate_syntax

__all__ = [
    "SpecLoader",
    "find_error_ranges",
    "merge_ranges",
    "parse_json",
    "split_highlights",
    "validate_syntax",
]
