"""Tokenizer for the historical export's minimal CSV dialect."""

from __future__ import annotations

FIELD_SEPARATOR = ","
QUOTE = '"'


def split_fields(line: str) -> list[str]:
    """Split ``line`` on commas, treating commas inside double quotes as text.

    A quote only toggles quoted mode and is never part of a field. There are no
    escaped quotes and no multi-line fields.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == FIELD_SEPARATOR and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields
