"""
Canonical layout for response bodies.

JSON is parsed and re-serialised with two-space indentation, HTML is
re-indented by nesting depth and every other format passes through as the
decoded text.  ``canonicalize`` never raises: when a body cannot be
reformatted the decoded text is returned unchanged.
"""

import json
import logging
from typing import Callable, Dict, Optional, Union

from respview.formats import FormatTag, decode_body, load_json
from respview.html_format import format_html

logger = logging.getLogger(__name__)

JSON_INDENT = 2


def format_json(text: str, indent: int = JSON_INDENT) -> str:
    """
    Re-serialise a JSON document.

    Object key order is preserved (``dict`` keeps insertion order); when an
    object repeats a key the last value wins, as in the parse itself.
    Raises ``ValueError`` when *text* is not JSON.
    """
    data = load_json(text)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def _passthrough(text: str, indent: int) -> str:
    return text


def _html(text: str, indent: int) -> str:
    return format_html(text, indent=" " * indent)


_FORMATTERS: Dict[FormatTag, Callable[[str, int], str]] = {
    FormatTag.JSON: format_json,
    FormatTag.HTML: _html,
    FormatTag.XML: _passthrough,
    FormatTag.CSS: _passthrough,
    FormatTag.JAVASCRIPT: _passthrough,
    FormatTag.PLAIN_TEXT: _passthrough,
}

if set(_FORMATTERS) != set(FormatTag):
    raise RuntimeError("every FormatTag needs a formatter")


def canonicalize(
    body: Union[bytes, str],
    tag: FormatTag,
    declared_type: Optional[str] = None,
    indent: int = JSON_INDENT,
) -> str:
    """Return the canonical text for *body* classified as *tag*."""
    text = decode_body(body, declared_type)
    if not text:
        return text
    try:
        return _FORMATTERS[tag](text, indent)
    except (ValueError, RecursionError) as exc:
        logger.debug("%s body did not reformat (%s); using it verbatim", tag.value, exc)
        return text
    except Exception:
        logger.warning("unexpected error reformatting %s body; using it verbatim",
                       tag.value, exc_info=True)
        return text
