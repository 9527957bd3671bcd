"""
Format tags and media-type mapping for respview.

A response body is always classified into exactly one ``FormatTag``.
``PLAIN_TEXT`` is the catch-all: detection can never fail to produce a tag.
"""

import codecs
import json
import logging
from enum import Enum
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)


class FormatTag(Enum):
    """Closed set of text formats a response body can be classified as."""
    JSON = "json"
    HTML = "html"
    XML = "xml"
    CSS = "css"
    JAVASCRIPT = "javascript"
    PLAIN_TEXT = "text"


# Substrings searched for (case-insensitively) in a declared Content-Type.
# Order matters only for readability; the substrings do not overlap.
MEDIA_TYPES: Tuple[Tuple[str, FormatTag], ...] = (
    ("application/json", FormatTag.JSON),
    ("text/html", FormatTag.HTML),
    ("text/css", FormatTag.CSS),
    ("application/javascript", FormatTag.JAVASCRIPT),
    ("text/javascript", FormatTag.JAVASCRIPT),
    ("text/xml", FormatTag.XML),
    ("application/xml", FormatTag.XML),
)


def tag_for_media_type(declared_type: Optional[str]) -> Optional[FormatTag]:
    """
    Map a declared media type onto a tag.

    Returns *None* for ``text/plain``, unrecognised types and missing
    headers, meaning the caller should sniff the body instead.
    """
    if not declared_type:
        return None
    lowered = declared_type.lower()
    for media_type, tag in MEDIA_TYPES:
        if media_type in lowered:
            return tag
    return None


def charset_of(declared_type: Optional[str]) -> Optional[str]:
    """Extract a usable ``charset=`` parameter, or None."""
    if not declared_type:
        return None
    for part in declared_type.split(";")[1:]:
        part = part.strip()
        if part.lower().startswith("charset="):
            name = part.split("=", 1)[1].strip().strip('"').strip("'")
            try:
                info = codecs.lookup(name)
            except LookupError:
                return None
            # base64, rot13 and friends are bytes-to-bytes transforms, not charsets
            if not getattr(info, "_is_text_encoding", True):
                return None
            return info.name
    return None


def decode_body(body: Union[bytes, str], declared_type: Optional[str] = None) -> str:
    """
    Decode a response body for display.

    Undecodable bytes become U+FFFD rather than raising, so every body
    yields some text.
    """
    if isinstance(body, str):
        return body
    if body.startswith(codecs.BOM_UTF8):
        body = body[len(codecs.BOM_UTF8):]
    encoding = charset_of(declared_type) or "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except (LookupError, UnicodeError) as exc:
        logger.debug("decoding as %s failed (%s), using utf-8", encoding, exc)
        return body.decode("utf-8", errors="replace")


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def load_json(text: str):
    """Parse strict JSON; NaN and Infinity are rejected like any other error."""
    return json.loads(text, parse_constant=_reject_constant)
