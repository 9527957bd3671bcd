"""
Tests for the theme and terminal renderer.
"""

import dataclasses

import pytest

from respview.exceptions import RenderError
from respview.formats import FormatTag
from respview.highlighting import Token, TokenClass, tokenize
from respview.render import render, strip_styles
from respview.theme import DEFAULT_THEME, PLAIN_STYLE, StyleSpec, Theme


def test_render_is_lossless_after_stripping():
    text = '{\n  "a": 1,\n  "b": [\n    2,\n    3\n  ]\n}'
    rendered = render(tokenize(text, FormatTag.JSON), DEFAULT_THEME)
    assert rendered != text
    assert strip_styles(rendered) == text


def test_render_colours_keywords():
    rendered = render([Token("true", TokenClass.KEYWORD)], DEFAULT_THEME)
    assert rendered.startswith("\x1b[")
    assert "38;5;" in rendered
    assert strip_styles(rendered) == "true"


def test_render_truecolor():
    rendered = render([Token("1", TokenClass.NUMBER)], DEFAULT_THEME, color_depth="truecolor")
    assert "38;2;" in rendered
    assert strip_styles(rendered) == "1"


def test_render_plain_token_is_unstyled():
    assert render([Token("abc def", TokenClass.PLAIN)], DEFAULT_THEME) == "abc def"


def test_render_unknown_class_degrades_to_default():
    assert render([Token("x", "not-a-class")], DEFAULT_THEME) == "x"


def test_render_preserves_order_and_newlines():
    tokens = [
        Token("a", TokenClass.KEYWORD),
        Token("\n", TokenClass.PLAIN),
        Token("b\nc", TokenClass.STRING),
        Token("  ", TokenClass.PLAIN),
    ]
    assert strip_styles(render(tokens, DEFAULT_THEME)) == "a\nb\nc  "


def test_render_empty():
    assert render([], DEFAULT_THEME) == ""


def test_render_wraps_formatter_failures():
    def broken_tokens():
        yield Token("a", TokenClass.PLAIN)
        raise KeyError("boom")

    with pytest.raises(RenderError):
        render(broken_tokens(), DEFAULT_THEME)


def test_theme_is_total():
    theme = Theme(name="mini", styles={TokenClass.KEYWORD: StyleSpec("#ff0000")})
    assert set(theme.styles) == set(TokenClass)
    assert theme.styles[TokenClass.STRING] == PLAIN_STYLE
    assert theme.styles[TokenClass.KEYWORD].color == "#ff0000"


def test_theme_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_THEME.name = "other"
    with pytest.raises(TypeError):
        DEFAULT_THEME.styles[TokenClass.KEYWORD] = PLAIN_STYLE


def test_unstyled_classes_do_not_inherit_parent_colour():
    """A tag with no style of its own stays plain even if identifiers are coloured."""
    theme = Theme(name="mini", styles={TokenClass.IDENTIFIER: StyleSpec("#ff0000")})
    assert render([Token("p", TokenClass.TAG)], theme) == "p"
    assert render([Token("p", TokenClass.IDENTIFIER)], theme) != "p"


def test_style_spec_to_pygments():
    assert StyleSpec().to_pygments() == "noinherit"
    assert StyleSpec("#123456", bold=True, italic=True, underline=True).to_pygments() == (
        "noinherit #123456 bold italic underline"
    )


def test_strip_styles_only_removes_sgr():
    assert strip_styles("\x1b[38;5;81;01mtrue\x1b[39;00m and \x1b[0m") == "true and "
    assert strip_styles("no escapes [here]") == "no escapes [here]"
