"""Whitespace-preserving tokenizer for source text runs.

WHY: To keep the authored spacing between words, the layout must know
exactly where each word, each run of spaces, and each hard line break sits
in the source text. Splitting on whitespace and discarding it would lose
double spaces, tabs, and non-breaking spaces.

HOW: Line breaks are normalized first (CRLF and lone CR become "\\n"), then
a single left-to-right scan classifies each character and extends the
current token while the class stays the same.

RULES:
- "\\n" is always its own LINE_BREAK token (blank lines yield two tokens)
- Space, tab, and U+00A0 runs merge into one WHITESPACE token
- Every other maximal character run is one WORD token
- Concatenating token texts reproduces the normalized input exactly
- None or "" input → empty list
"""

from __future__ import annotations

import re
from typing import List, Optional

from word_splitter.core.ir import Token, TokenKind

_LINE_BREAK_RE = re.compile(r"\r\n?")

LINE_BREAK = "\n"
WHITESPACE_CHARS = frozenset({" ", "\t", "\u00a0"})


def normalize_line_breaks(text: str) -> str:
    """Replace CRLF and lone CR with "\\n"."""
    return _LINE_BREAK_RE.sub(LINE_BREAK, text)


def is_whitespace_char(ch: str) -> bool:
    return ch in WHITESPACE_CHARS


def tokenize(text: Optional[str]) -> List[Token]:
    """Split text into WORD, WHITESPACE, and LINE_BREAK tokens.

    Args:
        text: Raw run contents. CRLF / CR line endings are normalized
              before indexing, so offsets refer to the normalized string.

    Returns:
        Contiguous, non-overlapping tokens covering the normalized text.
    """
    if not text:
        return []

    s = normalize_line_breaks(text)
    tokens: List[Token] = []
    i = 0
    n = len(s)

    while i < n:
        ch = s[i]

        if ch == LINE_BREAK:
            tokens.append(Token(TokenKind.LINE_BREAK, LINE_BREAK, i, i + 1))
            i += 1
            continue

        start = i
        if is_whitespace_char(ch):
            while i < n and is_whitespace_char(s[i]):
                i += 1
            tokens.append(Token(TokenKind.WHITESPACE, s[start:i], start, i))
            continue

        while i < n and s[i] != LINE_BREAK and not is_whitespace_char(s[i]):
            i += 1
        tokens.append(Token(TokenKind.WORD, s[start:i], start, i))

    return tokens
