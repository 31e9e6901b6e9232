"""Single-line CSV tokenizer.

Commas inside a double-quoted span do not split. The scan flips an
in-quotes flag on every ``"`` and drops the quote characters, so an escaped
``""`` inside a quoted field flips the flag twice and is lost rather than
kept as a literal quote. Source sheets do not contain escaped quotes.
Malformed quoting never raises; an unterminated quote swallows the rest
of the line into the current field.
"""

from __future__ import annotations


def tokenize_line(line: str) -> list[str]:
    """Split one CSV *line* into stripped field values.

    Example:
        >>> tokenize_line('a.mp4, Demo ,"HLS, 1080p",')
        ['a.mp4', 'Demo', 'HLS, 1080p', '']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def split_lines(text: str) -> list[str]:
    """Return the non-blank lines of *text* (CRLF tolerant)."""
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]
