"""Tests for the whitespace-preserving tokenizer.

WHY: Every later stage trusts the tokenizer's offsets and classification.
A merged line break or a dropped space would shift every following word.

HOW: Feed representative strings and check kinds, texts, offsets, and the
concatenation property.
"""

import pytest

from word_splitter.core.ir import TokenKind
from word_splitter.core.tokenizer import is_whitespace_char, normalize_line_breaks, tokenize

W = TokenKind.WORD
S = TokenKind.WHITESPACE
B = TokenKind.LINE_BREAK


def _shape(tokens):
    return [(t.kind, t.text) for t in tokens]


class TestTokenize:
    """Classification and offsets."""

    def test_words_whitespace_and_break(self):
        tokens = tokenize("Hello  world\nfoo")
        assert _shape(tokens) == [
            (W, "Hello"),
            (S, "  "),
            (W, "world"),
            (B, "\n"),
            (W, "foo"),
        ]

    def test_offsets_are_contiguous(self):
        tokens = tokenize("Hello  world\nfoo")
        assert [(t.start, t.end) for t in tokens] == [(0, 5), (5, 7), (7, 12), (12, 13), (13, 16)]

    def test_mixed_whitespace_merges(self):
        tokens = tokenize("a \t b")
        assert _shape(tokens) == [(W, "a"), (S, " \t "), (W, "b")]

    def test_consecutive_breaks_are_separate_tokens(self):
        tokens = tokenize("A\n\nB")
        assert [t.kind for t in tokens] == [W, B, B, W]

    def test_whitespace_before_break_stays_separate(self):
        tokens = tokenize("a  \n  b")
        assert [t.kind for t in tokens] == [W, S, B, S, W]

    def test_leading_and_trailing_whitespace(self):
        tokens = tokenize("  x  ")
        assert _shape(tokens) == [(S, "  "), (W, "x"), (S, "  ")]

    def test_punctuation_belongs_to_word(self):
        tokens = tokenize("Hi, there!")
        assert [t.text for t in tokens if t.kind is W] == ["Hi,", "there!"]

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_input(self, text):
        assert tokenize(text) == []

    def test_only_whitespace(self):
        assert _shape(tokenize("   ")) == [(S, "   ")]


class TestLineBreakNormalization:
    """CRLF and lone CR become a single LINE_BREAK."""

    def test_crlf(self):
        tokens = tokenize("a\r\nb")
        assert _shape(tokens) == [(W, "a"), (B, "\n"), (W, "b")]

    def test_lone_cr(self):
        tokens = tokenize("a\rb")
        assert _shape(tokens) == [(W, "a"), (B, "\n"), (W, "b")]

    def test_offsets_refer_to_normalized_text(self):
        tokens = tokenize("a\r\nb")
        assert tokens[-1].start == 2

    def test_normalize_line_breaks(self):
        assert normalize_line_breaks("a\r\nb\rc\nd") == "a\nb\nc\nd"


class TestTokenInvariants:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("text", [
        "Hello  world\nfoo",
        "\n\n",
        " \t lead",
        "trail\t",
        "x y\r\nz",
    ])
    def test_concatenation_reproduces_normalized_input(self, text):
        tokens = tokenize(text)
        assert "".join(t.text for t in tokens) == normalize_line_breaks(text)

    def test_words_contain_no_whitespace(self):
        for token in tokenize("one two\tthree four\nfive"):
            if token.kind is W:
                assert not any(is_whitespace_char(ch) or ch == "\n" for ch in token.text)

    def test_token_text_matches_slice(self):
        text = "Hello  world\nfoo"
        for token in tokenize(text):
            assert text[token.start:token.end] == token.text
