"""
Interactive viewer prompt.

Reads ``path`` or ``path ; content-type`` lines, runs the body through the
pipeline and prints the coloured result.  The input line itself is
highlighted as you type:

  File path       green
  ';' separator   cyan
  Media type      yellow

Uses Pygments for lexing the input and prompt_toolkit for rendering.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import ANSI, FormattedText
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.lexers import PygmentsLexer
from prompt_toolkit.styles import Style as PTStyle, merge_styles
from prompt_toolkit.styles.pygments import style_from_pygments_cls
from pygments.lexer import RegexLexer, bygroups
from pygments.style import Style as PygmentsStyle
from pygments.token import Name, Punctuation, String, Text, Token

from respview.config import Config
from respview.pipeline import run

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input lexer
# ---------------------------------------------------------------------------

class ViewerInputLexer(RegexLexer):
    """Lexer for the viewer's ``path ; content-type`` input line."""

    name = "ViewerInput"
    aliases = ["viewerinput"]

    tokens = {
        "root": [
            (r"\s+", Text),
            (r"(;)(\s*)", bygroups(Punctuation, Text), "media"),
            (r"[^;\s]+", String),
        ],
        "media": [
            (r"\S+", Name.Tag),
            (r"\s+", Text),
        ],
    }


class ViewerInputStyle(PygmentsStyle):
    """Colours for the input line."""

    default_style = ""
    styles = {
        Token.Text:    "",
        String:        "#a6e22e",           # green, path
        Punctuation:   "#66d9ef",           # cyan, separator
        Name.Tag:      "#e6db74",           # yellow, media type
    }


PROMPT_STYLE = {
    "prompt-name":    "#00d7d7 bold",
    "prompt-arrow":   "#6a6a6a",
    "summary-label":  "#61afef bold",
    "summary-value":  "italic",
    "summary-format": "#ffcc00 bold",
    "error":          "#ff0000",
}


def parse_input(line: str) -> Tuple[str, Optional[str]]:
    """Split ``path ; content-type`` into its parts."""
    path, _, declared = line.partition(";")
    declared = declared.strip()
    return path.strip(), (declared or None)


def summary_fragments(declared_type: Optional[str], tag_value: str) -> FormattedText:
    """The Content-Type / Detected Format header as styled fragments."""
    fragments = [
        ("class:summary-label", "Content-Type: "),
        ("class:summary-value", declared_type or ""),
        ("", "\n"),
    ]
    if tag_value not in (declared_type or "").lower():
        fragments.extend([
            ("class:summary-label", "Detected Format: "),
            ("class:summary-format", tag_value.upper()),
            ("", "\n"),
        ])
    return FormattedText(fragments)


class ViewerPrompt:
    """Read-eval-print loop around the pipeline."""

    def __init__(self, config: Config):
        self.config = config
        self.style = merge_styles([
            style_from_pygments_cls(ViewerInputStyle),
            PTStyle.from_dict(PROMPT_STYLE),
        ])
        self.session = PromptSession(
            lexer=PygmentsLexer(ViewerInputLexer),
            style=self.style,
            history=InMemoryHistory(),
        )

    def show(self, line: str) -> bool:
        """Render the file named on *line*; False when it cannot be read."""
        path, declared_type = parse_input(line)
        try:
            body = Path(path).expanduser().read_bytes()
        except OSError as e:
            logger.debug("could not read %s", path, exc_info=True)
            print_formatted_text(
                FormattedText([("class:error", f"[Error] {e}")]), style=self.style
            )
            return False

        result = run(body, declared_type, config=self.config)
        if self.config.show_summary:
            print_formatted_text(
                summary_fragments(declared_type, result.tag.value), style=self.style
            )
        print_formatted_text(ANSI(result.output))
        return True

    def loop(self):
        """Prompt until Ctrl+C / Ctrl+D."""
        message = [
            ("class:prompt-name", "respview"),
            ("class:prompt-arrow", " > "),
        ]
        while True:
            try:
                line = self.session.prompt(message).strip()
            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye!")
                break
            if not line:
                continue
            self.show(line)
