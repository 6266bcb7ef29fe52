from __future__ import annotations

"""
Shell Input Tokenizer.

Splits a command line on whitespace while treating double-quoted segments as
part of a single token. Quote characters themselves are dropped, and `""`
yields an empty token (so empty document content can be written).
"""

from typing import List


def parse_input(line: str) -> List[str]:
    """
    Tokenize one shell line.

    Example:
        >>> parse_input('newDoc a txt "hello world"')
        ['newDoc', 'a', 'txt', 'hello world']

    An unterminated quote runs to the end of the line.
    """
    tokens: List[str] = []
    buf: List[str] = []
    in_quote = False
    pending = False

    for ch in line:
        if ch == '"':
            in_quote = not in_quote
            pending = True
        elif ch.isspace() and not in_quote:
            if pending:
                tokens.append("".join(buf))
                buf = []
                pending = False
        else:
            buf.append(ch)
            pending = True

    if pending:
        tokens.append("".join(buf))
    return tokens
