"""
Lexical tokenizing of canonical response text.

Each format tag selects a Pygments grammar; the resulting Pygments token
types are folded into a small, fixed palette of ``TokenClass`` values:

  keyword      true, function, return, @media
  string       "...", '...'
  number       42, 3.14
  comment      /* ... */, <!-- ... -->
  punctuation  { } [ ] < >
  operator     = + && ||
  identifier   names
  tag          element names, JSON object keys
  attribute    attribute names
  plain        whitespace and text
  error        characters a grammar could not place

Plain-text bodies are sniffed: every grammar scans the text and the one
with the densest coverage of significant tokens wins, provided it beats
a baseline.  Otherwise the text comes back as a single plain token.

Tokenizing is lossless: joining the lexemes in order gives back the input.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import (
    Token as PygmentsToken,
    _TokenType,
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)

from respview.exceptions import TokenizationError
from respview.formats import FormatTag

logger = logging.getLogger(__name__)

DEFAULT_SNIFF_THRESHOLD = 0.5


class TokenClass(Enum):
    """Syntactic category of a lexeme, used to pick its display style."""
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    COMMENT = "comment"
    PUNCTUATION = "punctuation"
    OPERATOR = "operator"
    IDENTIFIER = "identifier"
    TAG = "tag"
    ATTRIBUTE = "attribute"
    PLAIN = "plain"
    ERROR = "error"


class Token(NamedTuple):
    lexeme: str
    token_class: TokenClass


# ---------------------------------------------------------------------------
# Pygments token type <-> TokenClass
# ---------------------------------------------------------------------------

# Looked up from the most specific type upwards, so Name.Tag wins over Name.
_CLASS_FOR_TYPE: Dict[_TokenType, TokenClass] = {
    Keyword:        TokenClass.KEYWORD,
    String:         TokenClass.STRING,
    Number:         TokenClass.NUMBER,
    Comment:        TokenClass.COMMENT,
    Punctuation:    TokenClass.PUNCTUATION,
    Operator:       TokenClass.OPERATOR,
    Name.Tag:       TokenClass.TAG,
    Name.Attribute: TokenClass.ATTRIBUTE,
    Name:           TokenClass.IDENTIFIER,
    Error:          TokenClass.ERROR,
    Text:           TokenClass.PLAIN,
}

# Representative Pygments type for each class, used when rendering.
TYPE_FOR_CLASS: Dict[TokenClass, _TokenType] = {
    TokenClass.KEYWORD:     Keyword,
    TokenClass.STRING:      String,
    TokenClass.NUMBER:      Number,
    TokenClass.COMMENT:     Comment,
    TokenClass.PUNCTUATION: Punctuation,
    TokenClass.OPERATOR:    Operator,
    TokenClass.IDENTIFIER:  Name,
    TokenClass.TAG:         Name.Tag,
    TokenClass.ATTRIBUTE:   Name.Attribute,
    TokenClass.PLAIN:       Text,
    TokenClass.ERROR:       Error,
}

if set(TYPE_FOR_CLASS) != set(TokenClass):
    raise RuntimeError("every TokenClass needs a token type")


def classify(ttype: _TokenType) -> TokenClass:
    """Fold a Pygments token type into the palette."""
    while ttype is not None and ttype is not PygmentsToken:
        token_class = _CLASS_FOR_TYPE.get(ttype)
        if token_class is not None:
            return token_class
        ttype = ttype.parent
    return TokenClass.PLAIN


# ---------------------------------------------------------------------------
# Grammar registry
# ---------------------------------------------------------------------------

# Pygments lexer alias per tag; PLAIN_TEXT has no grammar and is sniffed.
GRAMMARS: Dict[FormatTag, Optional[str]] = {
    FormatTag.JSON:       "json",
    FormatTag.HTML:       "html",
    FormatTag.XML:        "xml",
    FormatTag.CSS:        "css",
    FormatTag.JAVASCRIPT: "javascript",
    FormatTag.PLAIN_TEXT: None,
}

if set(GRAMMARS) != set(FormatTag):
    raise RuntimeError("every FormatTag needs a grammar entry")

# Candidates tried when sniffing, in tie-break order.
SNIFF_CANDIDATES: List[str] = [name for name in GRAMMARS.values() if name]

# Classes that count as evidence a grammar understands the text.  Names,
# tags and plain text are excluded: most grammars happily read prose as
# identifiers or selectors.
SIGNIFICANT_CLASSES = frozenset({
    TokenClass.KEYWORD,
    TokenClass.STRING,
    TokenClass.NUMBER,
    TokenClass.COMMENT,
    TokenClass.PUNCTUATION,
    TokenClass.OPERATOR,
    TokenClass.ATTRIBUTE,
})


def make_lexer(name: str) -> Lexer:
    """Build a Pygments lexer that neither adds nor strips characters."""
    return get_lexer_by_name(name, stripnl=False, stripall=False, ensurenl=False)


def lexer_for(tag: FormatTag) -> Optional[Lexer]:
    """Return the grammar registered for *tag*, or None when it must be sniffed."""
    name = GRAMMARS[tag]
    if name is None:
        return None
    return make_lexer(name)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def scan(lexer: Lexer, text: str) -> Iterator[Token]:
    """
    Run *lexer* over *text*, yielding tokens lazily.

    Raises ``TokenizationError`` as soon as the scan leaves a gap, overlaps
    itself or stops short of the end of the text.
    """
    grammar = lexer.aliases[0] if lexer.aliases else lexer.name
    position = 0
    for index, ttype, value in lexer.get_tokens_unprocessed(text):
        if not value:
            continue
        if index != position:
            raise TokenizationError(
                f"scan jumped from offset {position} to {index}",
                grammar=grammar, offset=position,
            )
        position += len(value)
        yield Token(value, classify(ttype))
    if position != len(text):
        raise TokenizationError(
            f"scan stopped at offset {position} of {len(text)}",
            grammar=grammar, offset=position,
        )


def density(tokens: List[Token]) -> float:
    """
    Score how well a grammar covered a text.

    Fraction of non-whitespace characters in significant tokens, with
    error characters counted twice against the grammar.
    """
    total = 0
    significant = 0
    errors = 0
    for lexeme, token_class in tokens:
        size = len("".join(lexeme.split()))
        total += size
        if token_class in SIGNIFICANT_CLASSES:
            significant += size
        elif token_class is TokenClass.ERROR:
            errors += size
    if total == 0:
        return 0.0
    return (significant - 2 * errors) / total


def sniff_lexer(text: str, threshold: float = DEFAULT_SNIFF_THRESHOLD) -> Optional[Lexer]:
    """
    Pick the best grammar for untagged text, or None when none is convincing.

    A grammar whose own ``analyse_text`` heuristic is certain (1.0) is
    taken straight away.
    """
    if not text.strip():
        return None

    best: Optional[Lexer] = None
    best_score = threshold
    for name in SNIFF_CANDIDATES:
        lexer = make_lexer(name)
        if lexer.analyse_text(text) >= 1.0:
            logger.debug("sniffed grammar %s by analyse_text", name)
            return lexer
        try:
            score = density(list(scan(lexer, text)))
        except TokenizationError as exc:
            logger.debug("grammar %s rejected while sniffing: %s", name, exc)
            continue
        logger.debug("grammar %s scored %.3f", name, score)
        if score > best_score:
            best, best_score = lexer, score
    return best


def tokenize(
    text: str,
    tag: FormatTag,
    sniff_threshold: float = DEFAULT_SNIFF_THRESHOLD,
) -> Iterator[Token]:
    """
    Split canonical *text* into tokens using the grammar for *tag*.

    Returns a single-use iterator.  ``TokenizationError`` surfaces while
    the iterator is being consumed.
    """
    lexer = lexer_for(tag)
    if lexer is None:
        lexer = sniff_lexer(text, sniff_threshold)
    if lexer is None:
        if text:
            yield Token(text, TokenClass.PLAIN)
        return
    yield from scan(lexer, text)
