"""
Colour theme for rendered response bodies.

A ``Theme`` is an immutable mapping from ``TokenClass`` to a ``StyleSpec``.
It is built once (``DEFAULT_THEME``) and handed to the renderer by
reference; nothing mutates it afterwards, so it can be shared freely
between threads.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Type

from pygments.style import Style as PygmentsStyle
from pygments.token import Token

from respview.highlighting import TYPE_FOR_CLASS, TokenClass


@dataclass(frozen=True)
class StyleSpec:
    """Display style of one token class."""

    color: Optional[str] = None     # "#rrggbb"; None keeps the terminal colour
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def to_pygments(self) -> str:
        """Pygments style string, never inheriting from the parent type."""
        parts = ["noinherit"]
        if self.color:
            parts.append(self.color)
        if self.bold:
            parts.append("bold")
        if self.italic:
            parts.append("italic")
        if self.underline:
            parts.append("underline")
        return " ".join(parts)


PLAIN_STYLE = StyleSpec()


@dataclass(frozen=True)
class Theme:
    """
    Total mapping from token class to style.

    Classes missing from *styles* are filled in with *default*, so every
    lookup succeeds.
    """

    name: str
    styles: Mapping[TokenClass, StyleSpec]
    default: StyleSpec = PLAIN_STYLE
    pygments_style: Type[PygmentsStyle] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        complete: Dict[TokenClass, StyleSpec] = {
            token_class: self.styles.get(token_class, self.default)
            for token_class in TokenClass
        }
        object.__setattr__(self, "styles", MappingProxyType(complete))
        object.__setattr__(self, "pygments_style", self._build_pygments_style())

    def _build_pygments_style(self) -> Type[PygmentsStyle]:
        styles = {Token: self.default.to_pygments()}
        for token_class, spec in self.styles.items():
            styles[TYPE_FOR_CLASS[token_class]] = spec.to_pygments()
        class_name = "".join(part.title() for part in self.name.split("-")) + "Style"
        return type(class_name, (PygmentsStyle,), {
            "default_style": "",
            "styles": styles,
        })


# ---------------------------------------------------------------------------
# Colour palette (Monokai, readable on dark backgrounds)
# ---------------------------------------------------------------------------

DEFAULT_THEME = Theme(
    name="monokai",
    styles={
        TokenClass.KEYWORD:     StyleSpec("#66d9ef", bold=True),    # cyan
        TokenClass.STRING:      StyleSpec("#e6db74"),               # yellow
        TokenClass.NUMBER:      StyleSpec("#ae81ff"),               # purple
        TokenClass.COMMENT:     StyleSpec("#75715e", italic=True),  # grey
        TokenClass.PUNCTUATION: StyleSpec("#f8f8f2"),               # off-white
        TokenClass.OPERATOR:    StyleSpec("#f92672"),               # pink
        TokenClass.IDENTIFIER:  StyleSpec("#a6e22e"),               # green
        TokenClass.TAG:         StyleSpec("#f92672"),
        TokenClass.ATTRIBUTE:   StyleSpec("#a6e22e"),
        TokenClass.ERROR:       StyleSpec("#960050", underline=True),
        TokenClass.PLAIN:       PLAIN_STYLE,                         # terminal default
    },
)
