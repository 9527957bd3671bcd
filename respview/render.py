"""
Terminal rendering of token streams.

Tokens are written through a Pygments terminal formatter using the
theme's Pygments style.  Only SGR escapes (``ESC [ ... m``) are added, so
``strip_styles(render(tokens, theme))`` is exactly the joined lexemes.
"""

import io
import re
from typing import Iterable, Iterator, Tuple

from pygments.formatters import Terminal256Formatter, TerminalTrueColorFormatter
from pygments.token import Token as PygmentsToken, _TokenType

from respview.exceptions import RenderError, RespviewError
from respview.highlighting import TYPE_FOR_CLASS, Token
from respview.theme import DEFAULT_THEME, Theme

COLOR_DEPTHS = {
    "256": Terminal256Formatter,
    "truecolor": TerminalTrueColorFormatter,
}

_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_styles(rendered: str) -> str:
    """Remove every style marker from rendered output."""
    return _SGR_RE.sub("", rendered)


def _pygments_stream(tokens: Iterable[Token]) -> Iterator[Tuple[_TokenType, str]]:
    for lexeme, token_class in tokens:
        # Unknown classes map to the root type, which carries the default style.
        yield TYPE_FOR_CLASS.get(token_class, PygmentsToken), lexeme


def render(tokens: Iterable[Token], theme: Theme = DEFAULT_THEME, color_depth: str = "256") -> str:
    """
    Produce the styled string for *tokens*, preserving their order.

    Raises ``RenderError`` when the formatter fails.
    """
    formatter_cls = COLOR_DEPTHS.get(color_depth, Terminal256Formatter)
    buf = io.StringIO()
    try:
        formatter = formatter_cls(style=theme.pygments_style)
        formatter.format(_pygments_stream(tokens), buf)
    except RespviewError:
        raise
    except Exception as exc:
        raise RenderError(f"could not render with theme {theme.name}: {exc}") from exc
    return buf.getvalue()
