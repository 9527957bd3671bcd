"""
Tag-aware HTML indentation.

Every tag, comment and text run is placed on its own line, indented two
spaces per level of element nesting:

    <html>
      <body>
        <p>
          hi
        </p>
      </body>
    </html>

Void elements (``<br>``, ``<img>`` ...) and self-closing tags do not open a
level.  The contents of ``<pre>`` and ``<textarea>`` are copied through
untouched; ``<script>`` and ``<style>`` bodies keep their own line breaks
but are re-indented.  Markup that does not balance is laid out on a best
effort basis and never raises.
"""

from html.parser import HTMLParser
from typing import List, Optional

INDENT = "  "

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
    # obsolete but still seen in the wild
    "basefont", "bgsound", "frame", "keygen",
})

PRESERVE_ELEMENTS = frozenset({"pre", "textarea"})
SCRIPT_ELEMENTS = frozenset({"script", "style"})


class HtmlIndenter(HTMLParser):
    """
    Streaming HTML re-indenter.

    Feed markup with ``feed()`` then call ``result()``.  Entity and
    character references are kept exactly as written.
    """

    def __init__(self, indent: str = INDENT):
        super().__init__(convert_charrefs=False)
        self.indent = indent
        self.lines: List[str] = []
        self.stack: List[str] = []
        self._text: List[str] = []
        # Set while inside <pre>/<textarea>: everything is copied verbatim
        # onto the current line until the element closes.
        self._preserve: Optional[str] = None
        self._preserve_depth = 0

    # ------------------------------------------------------------------ #
    # Output helpers                                                      #
    # ------------------------------------------------------------------ #

    @property
    def depth(self) -> int:
        return len(self.stack)

    def _emit(self, line: str):
        self.lines.append(self.indent * self.depth + line)

    def _flush_text(self):
        if not self._text:
            return
        text = "".join(self._text)
        self._text = []
        if self.stack and self.stack[-1] in SCRIPT_ELEMENTS:
            self._emit_block(text)
            return
        collapsed = " ".join(text.split())
        if collapsed:
            self._emit(collapsed)

    def _emit_block(self, text: str):
        """Re-indent a script/style body, keeping its own line structure."""
        raw_lines = [line.rstrip() for line in text.splitlines()]
        raw_lines = [line for line in raw_lines if line.strip()]
        if not raw_lines:
            return
        margin = min(len(line) - len(line.lstrip()) for line in raw_lines)
        for line in raw_lines:
            self._emit(line[margin:])

    def _append_raw(self, chunk: str):
        """Append to the preserved element's line without reformatting."""
        self.lines[-1] += chunk

    # ------------------------------------------------------------------ #
    # HTMLParser callbacks                                                #
    # ------------------------------------------------------------------ #

    def handle_starttag(self, tag, attrs):
        raw = self.get_starttag_text() or f"<{tag}>"
        if self._preserve is not None:
            if tag == self._preserve:
                self._preserve_depth += 1
            self._append_raw(raw)
            return

        self._flush_text()
        self._emit(raw)
        if tag in VOID_ELEMENTS:
            return
        if tag in PRESERVE_ELEMENTS:
            self._preserve = tag
            self._preserve_depth = 1
        self.stack.append(tag)

    def handle_startendtag(self, tag, attrs):
        raw = self.get_starttag_text() or f"<{tag} />"
        if self._preserve is not None:
            self._append_raw(raw)
            return
        self._flush_text()
        self._emit(raw)

    def handle_endtag(self, tag):
        if self._preserve is not None:
            if tag == self._preserve:
                self._preserve_depth -= 1
                if self._preserve_depth == 0:
                    self._preserve = None
                    self.stack.pop()
            self._append_raw(f"</{tag}>")
            return

        self._flush_text()
        if tag in self.stack:
            # Implicitly close anything left open inside this element.
            while self.stack:
                if self.stack.pop() == tag:
                    break
        self._emit(f"</{tag}>")

    def handle_data(self, data):
        if self._preserve is not None:
            self._append_raw(data)
            return
        self._text.append(data)

    def handle_entityref(self, name):
        self.handle_data(f"&{name};")

    def handle_charref(self, name):
        self.handle_data(f"&#{name};")

    def handle_comment(self, data):
        if self._preserve is not None:
            self._append_raw(f"<!--{data}-->")
            return
        self._flush_text()
        self._emit(f"<!--{data}-->")

    def handle_decl(self, decl):
        self._flush_text()
        self._emit(f"<!{decl}>")

    def handle_pi(self, data):
        self._flush_text()
        self._emit(f"<?{data}>")

    def unknown_decl(self, data):
        self._flush_text()
        self._emit(f"<![{data}]>")

    # ------------------------------------------------------------------ #
    # Result                                                              #
    # ------------------------------------------------------------------ #

    def result(self) -> str:
        """Close the parser and return the indented markup."""
        self.close()
        self._flush_text()
        return "\n".join(self.lines)


def format_html(markup: str, indent: str = INDENT) -> str:
    """Return *markup* re-laid out with one node per line."""
    indenter = HtmlIndenter(indent=indent)
    indenter.feed(markup)
    return indenter.result()
