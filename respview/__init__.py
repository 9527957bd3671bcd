"""
respview - Terminal viewer for HTTP response bodies.

Takes a raw body plus its declared Content-Type and:
- Classifies it (JSON, HTML, XML, CSS, JavaScript or plain text)
- Reformats JSON and HTML into an indented layout
- Colours it for an ANSI terminal, falling back to plain text on failure
"""

__version__ = "0.1.0"
__author__ = "respview Contributors"

from respview.formats import FormatTag
from respview.detector import detect
from respview.canonicalize import canonicalize
from respview.highlighting import Token, TokenClass, tokenize
from respview.theme import DEFAULT_THEME, StyleSpec, Theme
from respview.render import render, strip_styles
from respview.pipeline import PipelineResult, highlight, process, run

__all__ = [
    "FormatTag",
    "detect",
    "canonicalize",
    "Token",
    "TokenClass",
    "tokenize",
    "Theme",
    "StyleSpec",
    "DEFAULT_THEME",
    "render",
    "strip_styles",
    "PipelineResult",
    "process",
    "run",
    "highlight",
]
