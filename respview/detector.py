"""
Format detection for response bodies.

The declared Content-Type is authoritative when it names a supported
format.  Otherwise a fixed, ordered list of content sniffers runs against
the body and the first match wins; PLAIN_TEXT is the default.

Sniffers are heuristics.  The CSS pattern in particular can match
unrelated brace-delimited text, which is why it runs after the markup
checks and before the JavaScript check.
"""

import logging
import re
from typing import Callable, List, Optional, Union

from respview.formats import FormatTag, decode_body, load_json, tag_for_media_type

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Patterns (compiled once)
# ------------------------------------------------------------------

_XML_PAIR_RE = re.compile(r"<[a-zA-Z0-9]+( [^>]*)?>.*</[a-zA-Z0-9]+>")
_CSS_BLOCK_RE = re.compile(r"[a-z0-9\-_\.#]+ {[^}]*}")
_JS_DECL_RES = [
    re.compile(r"function [a-zA-Z0-9_]+ *\("),
    re.compile(r"var [a-zA-Z0-9_]+ *="),
    re.compile(r"const [a-zA-Z0-9_]+ *="),
]


def is_valid_json(text: str) -> bool:
    """Strict JSON check (NaN / Infinity are rejected)."""
    try:
        load_json(text)
    except (ValueError, RecursionError):
        return False
    return True


# ------------------------------------------------------------------
# Content sniffers, evaluated in registration order
# ------------------------------------------------------------------

_SNIFFERS: List[Callable[[str], Optional[FormatTag]]] = []   # populated below


def _register(fn):
    """Decorator that adds a sniffer to the ordered registry."""
    _SNIFFERS.append(fn)
    return fn


@_register
def _sniff_json(text: str) -> Optional[FormatTag]:
    stripped = text.lstrip()
    if stripped[:1] in ("{", "[") and is_valid_json(text):
        return FormatTag.JSON
    return None


@_register
def _sniff_html(text: str) -> Optional[FormatTag]:
    if "<!DOCTYPE html>" in text or "<html" in text:
        return FormatTag.HTML
    if "<head" in text and "<body" in text:
        return FormatTag.HTML
    return None


@_register
def _sniff_xml(text: str) -> Optional[FormatTag]:
    stripped = text.strip()
    if stripped.startswith("<?xml"):
        return FormatTag.XML
    if stripped.startswith("<") and _XML_PAIR_RE.search(text):
        return FormatTag.XML
    return None


@_register
def _sniff_css(text: str) -> Optional[FormatTag]:
    if _CSS_BLOCK_RE.search(text):
        return FormatTag.CSS
    return None


@_register
def _sniff_javascript(text: str) -> Optional[FormatTag]:
    if any(pattern.search(text) for pattern in _JS_DECL_RES):
        return FormatTag.JAVASCRIPT
    return None


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def detect_all(text: str) -> List[FormatTag]:
    """
    Return every tag whose sniffer matches *text*, in priority order.
    Useful for diagnosing ambiguous bodies; ``sniff`` takes the first.
    """
    tags: List[FormatTag] = []
    for sniffer in _SNIFFERS:
        tag = sniffer(text)
        if tag is not None:
            tags.append(tag)
    return tags


def sniff(text: str) -> FormatTag:
    """Classify *text* from its content alone."""
    for sniffer in _SNIFFERS:
        tag = sniffer(text)
        if tag is not None:
            logger.debug("sniffed %s via %s", tag.value, sniffer.__name__)
            return tag
    return FormatTag.PLAIN_TEXT


def detect(body: Union[bytes, str], declared_type: Optional[str] = None) -> FormatTag:
    """
    Classify a response body.

    Total: any input yields a tag.  A declared type that names a supported
    format is trusted even when the body does not validate as that format;
    canonicalization handles the mismatch.
    """
    declared = tag_for_media_type(declared_type)
    if declared is not None:
        logger.debug("declared type %r maps to %s", declared_type, declared.value)
        return declared

    text = decode_body(body, declared_type)
    if not text:
        return FormatTag.PLAIN_TEXT
    return sniff(text)
