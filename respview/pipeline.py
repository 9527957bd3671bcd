"""
Detect -> canonicalize -> tokenize -> render.

Every stage has a fixed fallback (``FALLBACK_POLICY``) so that ``process``
always returns something displayable:

  detect        fails -> treat the body as plain text
  canonicalize  fails -> the decoded body, verbatim
  tokenize      fails -> the canonical text, unstyled
  render        fails -> the canonical text, unstyled

The pipeline keeps no state between calls and the theme is read-only, so
concurrent calls from several threads need no locking.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from respview.canonicalize import canonicalize
from respview.config import Config
from respview.detector import detect
from respview.formats import FormatTag, decode_body
from respview.highlighting import DEFAULT_SNIFF_THRESHOLD, tokenize
from respview.render import render
from respview.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)


class Stage(Enum):
    DETECT = "detect"
    CANONICALIZE = "canonicalize"
    TOKENIZE = "tokenize"
    RENDER = "render"


class Fallback(Enum):
    """What the pipeline settles for when a stage fails."""
    PLAIN_TEXT_TAG = "plain-text tag"
    DECODED_TEXT = "decoded text"
    CANONICAL_TEXT = "canonical text"


FALLBACK_POLICY: Dict[Stage, Fallback] = {
    Stage.DETECT: Fallback.PLAIN_TEXT_TAG,
    Stage.CANONICALIZE: Fallback.DECODED_TEXT,
    Stage.TOKENIZE: Fallback.CANONICAL_TEXT,
    Stage.RENDER: Fallback.CANONICAL_TEXT,
}

if set(FALLBACK_POLICY) != set(Stage):
    raise RuntimeError("every Stage needs a fallback")


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    tag: FormatTag = FormatTag.PLAIN_TEXT
    canonical: str = ""
    output: str = ""
    highlighted: bool = False
    fallbacks: List[Stage] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.fallbacks)


Body = Union[bytes, bytearray, memoryview, str]


def _as_bytes_or_text(body: Body) -> Union[bytes, str]:
    if isinstance(body, (bytes, str)):
        return body
    return bytes(body)


def _last_resort_text(body: Body, declared_type: Optional[str]) -> str:
    try:
        return decode_body(_as_bytes_or_text(body), declared_type)
    except Exception:
        logger.error("body could not be decoded at all", exc_info=True)
        return ""


def _recover(result: PipelineResult, stage: Stage, exc: BaseException,
             body: Body, declared_type: Optional[str]):
    """Apply the fallback for *stage* to *result*."""
    action = FALLBACK_POLICY[stage]
    logger.warning("%s stage failed (%s: %s); falling back to %s",
                   stage.value, type(exc).__name__, exc, action.value)
    logger.debug("%s stage traceback", stage.value, exc_info=exc)
    result.fallbacks.append(stage)

    if action is Fallback.PLAIN_TEXT_TAG:
        result.tag = FormatTag.PLAIN_TEXT
    elif action is Fallback.DECODED_TEXT:
        result.canonical = _last_resort_text(body, declared_type)
        result.output = result.canonical
    elif action is Fallback.CANONICAL_TEXT:
        result.output = result.canonical
        result.highlighted = False


def _highlight_stages(result: PipelineResult, theme: Theme, color_depth: str,
                      sniff_threshold: float, body: Body, declared_type: Optional[str]):
    """Run the tokenize and render stages on ``result.canonical``."""
    try:
        # Materialised here so a scan failure is charged to this stage.
        tokens = list(tokenize(result.canonical, result.tag, sniff_threshold))
    except Exception as exc:
        _recover(result, Stage.TOKENIZE, exc, body, declared_type)
        return

    try:
        result.output = render(tokens, theme, color_depth)
        result.highlighted = True
    except Exception as exc:
        _recover(result, Stage.RENDER, exc, body, declared_type)


def run(
    body: Body,
    declared_type: Optional[str] = None,
    theme: Theme = DEFAULT_THEME,
    config: Optional[Config] = None,
) -> PipelineResult:
    """
    Run the whole pipeline and report what happened.

    With colour disabled in *config* the pipeline stops after
    canonicalization.
    """
    color = config.color if config is not None else True
    color_depth = config.color_depth if config is not None else "256"
    sniff_threshold = config.sniff_threshold if config is not None else DEFAULT_SNIFF_THRESHOLD

    result = PipelineResult()

    try:
        body = _as_bytes_or_text(body)
        result.tag = detect(body, declared_type)
    except Exception as exc:
        _recover(result, Stage.DETECT, exc, body, declared_type)

    try:
        result.canonical = canonicalize(body, result.tag, declared_type)
        result.output = result.canonical
    except Exception as exc:
        _recover(result, Stage.CANONICALIZE, exc, body, declared_type)

    if not color:
        return result

    _highlight_stages(result, theme, color_depth, sniff_threshold, body, declared_type)
    return result


def process(body: Body, declared_type: Optional[str] = None,
            theme: Theme = DEFAULT_THEME, config: Optional[Config] = None) -> str:
    """
    Classify, reformat and colour a response body for the terminal.

    Never raises: in the worst case the decoded body is returned as-is.
    """
    try:
        return run(body, declared_type, theme, config).output
    except Exception:
        logger.error("pipeline failed outside any stage", exc_info=True)
        return _last_resort_text(body, declared_type)


def highlight(text: str, tag: FormatTag, theme: Theme = DEFAULT_THEME,
              color_depth: str = "256",
              sniff_threshold: float = DEFAULT_SNIFF_THRESHOLD) -> str:
    """Colour text that is already canonical; returns *text* unstyled on failure."""
    result = PipelineResult(tag=tag, canonical=text, output=text)
    _highlight_stages(result, theme, color_depth, sniff_threshold, text, None)
    return result.output
