#!/usr/bin/env python3
"""
Formula Injection Sanitization

Imported text is stored and may later be exported to a spreadsheet. Values
starting with a formula trigger are prefixed with a single quote so that a
spreadsheet shows them as text instead of evaluating them.
"""

# Leading characters a spreadsheet treats as the start of a formula
FORMULA_TRIGGERS = ("=", "+", "-", "@", "\t", "\r")


def sanitize_formula_injection(value: str) -> str:
    """
    Neutralize a leading formula trigger.

    Args:
        value: Untrusted text from an import file

    Returns:
        The value, prefixed with "'" when it starts with a trigger character

    Example:
        sanitize_formula_injection("=HYPERLINK(...)") -> "'=HYPERLINK(...)"
    """
    if value.startswith(FORMULA_TRIGGERS):
        return "'" + value
    return value
