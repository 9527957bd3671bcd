"""
Tests for tokenizing and grammar sniffing.
"""

import pytest
from pygments.token import Generic, Keyword, Name, String, Text

from respview.exceptions import TokenizationError
from respview.formats import FormatTag
from respview.highlighting import (
    Token,
    TokenClass,
    classify,
    density,
    lexer_for,
    scan,
    sniff_lexer,
    tokenize,
)


SAMPLES = {
    FormatTag.JSON: '{\n  "a": 1,\n  "b": [\n    2.5,\n    "x\\"y"\n  ],\n  "c": null\n}',
    FormatTag.HTML: (
        '<!DOCTYPE html>\n<html>\n  <head>\n    <style>p { color: red; }</style>\n'
        '    <script>var a = "<b>";</script>\n  </head>\n  <body class="x">\n'
        '    <p>\n      hi &amp; bye\n    </p>\n  </body>\n</html>'
    ),
    FormatTag.XML: '<?xml version="1.0"?>\r\n<note id="1"><!-- c --><to>Tove</to></note>\n',
    FormatTag.CSS: "@media screen {\n  .nav > a:hover { color: #fff; margin: 0 2px; }\n}\n",
    FormatTag.JAVASCRIPT: 'function foo(a) {\r\n  // hi\n  return a + 1;\t}\nconst s = `t${x}`;',
    FormatTag.PLAIN_TEXT: "just some words\n\n  and more\n",
}


@pytest.mark.parametrize("tag", list(FormatTag))
def test_tokenize_is_lossless(tag):
    text = SAMPLES[tag]
    tokens = list(tokenize(text, tag))
    assert "".join(token.lexeme for token in tokens) == text
    assert all(token.lexeme for token in tokens)


@pytest.mark.parametrize("tag", list(FormatTag))
def test_tokenize_lossless_on_foreign_text(tag):
    """Grammars fed text they do not understand still cover every character."""
    text = "¿garbage? \x00 {[<\"' ☃ \n\n"
    assert "".join(token.lexeme for token in tokenize(text, tag)) == text


def test_tokenize_empty_text_yields_nothing():
    for tag in FormatTag:
        assert list(tokenize("", tag)) == []


def test_tokenize_is_single_use_iterator():
    tokens = tokenize('{"a": 1}', FormatTag.JSON)
    assert iter(tokens) is tokens
    first = next(tokens)
    assert first == Token("{", TokenClass.PUNCTUATION)
    rest = list(tokens)
    assert list(tokens) == []
    assert "".join(t.lexeme for t in [first] + rest) == '{"a": 1}'


def test_json_token_classes():
    tokens = list(tokenize('{"a": 1, "b": true}', FormatTag.JSON))
    assert Token("{", TokenClass.PUNCTUATION) in tokens
    assert Token("1", TokenClass.NUMBER) in tokens
    assert Token("true", TokenClass.KEYWORD) in tokens
    key = next(t for t in tokens if t.lexeme == '"a"')
    assert key.token_class in (TokenClass.TAG, TokenClass.STRING)


def test_javascript_token_classes():
    tokens = list(tokenize("function foo() { return 'x'; }", FormatTag.JAVASCRIPT))
    assert Token("return", TokenClass.KEYWORD) in tokens
    assert Token("'x'", TokenClass.STRING) in tokens


def test_html_token_classes():
    tokens = list(tokenize('<p class="x">hi</p>', FormatTag.HTML))
    assert Token("p", TokenClass.TAG) in tokens
    assert Token("class", TokenClass.ATTRIBUTE) in tokens


def test_classify_walks_parents():
    assert classify(Keyword.Constant) is TokenClass.KEYWORD
    assert classify(Name.Builtin) is TokenClass.IDENTIFIER
    assert classify(Name.Tag) is TokenClass.TAG
    assert classify(String.Double) is TokenClass.STRING
    assert classify(Text.Whitespace) is TokenClass.PLAIN
    assert classify(Generic.Heading) is TokenClass.PLAIN


def test_plain_text_without_grammar_is_one_plain_token():
    text = "Hello there, this is just some text."
    assert list(tokenize(text, FormatTag.PLAIN_TEXT)) == [Token(text, TokenClass.PLAIN)]


def test_plain_text_sniffs_json_like_text():
    """Truncated JSON fails detection but still reads best as JSON."""
    tokens = list(tokenize("[1, 2", FormatTag.PLAIN_TEXT))
    assert Token("1", TokenClass.NUMBER) in tokens
    assert "".join(t.lexeme for t in tokens) == "[1, 2"


def test_sniff_threshold_must_be_exceeded():
    assert sniff_lexer("[1, 2", threshold=0.5) is not None
    assert sniff_lexer("[1, 2", threshold=1.0) is None


def test_sniff_ignores_whitespace_only_text():
    assert sniff_lexer("  \n\t ") is None
    assert list(tokenize("  \n", FormatTag.PLAIN_TEXT)) == [Token("  \n", TokenClass.PLAIN)]


def test_density_penalises_errors():
    assert density([Token("{", TokenClass.PUNCTUATION), Token(" ", TokenClass.PLAIN)]) == 1.0
    assert density([Token("ab", TokenClass.IDENTIFIER)]) == 0.0
    assert density([Token("a", TokenClass.STRING), Token("b", TokenClass.ERROR)]) == -0.5
    assert density([]) == 0.0


def test_lexer_for_plain_text_is_none():
    assert lexer_for(FormatTag.PLAIN_TEXT) is None
    for tag in FormatTag:
        if tag is not FormatTag.PLAIN_TEXT:
            assert lexer_for(tag) is not None


class GappyLexer:
    """Stand-in lexer that skips a character."""

    aliases = ["gappy"]
    name = "Gappy"

    def get_tokens_unprocessed(self, text):
        yield 0, Text, text[0]
        yield 2, Text, text[2:]


class ShortLexer:
    """Stand-in lexer that stops early."""

    aliases = ["short"]
    name = "Short"

    def get_tokens_unprocessed(self, text):
        yield 0, Text, text[:1]


def test_scan_rejects_gaps():
    tokens = scan(GappyLexer(), "abc")
    assert next(tokens) == Token("a", TokenClass.PLAIN)
    with pytest.raises(TokenizationError) as excinfo:
        next(tokens)
    assert excinfo.value.grammar == "gappy"
    assert excinfo.value.offset == 1


def test_scan_rejects_short_scans():
    with pytest.raises(TokenizationError):
        list(scan(ShortLexer(), "abc"))
